#!/usr/bin/env python3
#===- propcheck/seeds.py - Run And Trial Seeds ---------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   A run seed drives the generator RNG. Trial seeds are derived from
#   (run seed, attempt, property name) and only seed the *global* random and
#   numpy RNGs while a predicate runs, so predicates that use global
#   randomness replay with the run.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import hashlib
import random
import secrets
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np

_U32 = 0xFFFFFFFF


def new_run_seed() -> int:
    """Fresh 32-bit seed; recorded in the run result so the run can be replayed."""
    return secrets.randbits(32)


def _require_int(name: str, value: object) -> None:
    # bool is rejected: True/False as a seed is almost always a bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


def seed_everything(seed: int) -> None:
    """Seed the global Python and NumPy RNGs (numpy takes the low 32 bits)."""
    _require_int("seed", seed)
    random.seed(seed)
    np.random.seed(seed & _U32)


@contextmanager
def seeded(seed: int) -> Iterator[None]:
    """Run a block with seeded global RNGs, restoring the caller's RNG states on exit."""
    saved = (random.getstate(), np.random.get_state())
    try:
        seed_everything(seed)
        yield
    finally:
        random.setstate(saved[0])
        np.random.set_state(saved[1])


def derive_seed(base_seed: int, idx: int, tag: Optional[str] = None) -> int:
    """
    Stable u32 trial seed for attempt `idx` of a run.

    The tag (usually the property name) keeps properties that share a run
    seed on different trial seeds.
    """
    _require_int("base_seed", base_seed)
    _require_int("idx", idx)
    key = "|".join((str(base_seed), str(idx), tag or "")).encode("utf-8")
    return int.from_bytes(hashlib.sha256(key).digest()[:4], "little")
