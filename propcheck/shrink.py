#!/usr/bin/env python3
#===- propcheck/shrink.py - Shrink Relations And Search ------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   1) Shrink relations: for a value, a lazy finite sequence of strictly
#      smaller candidates, most aggressive reduction first.
#   2) Shrinker: greedy search for a locally-minimal counterexample. Only
#      candidates that still FAIL or ERROR are accepted.
#
# Termination:
#   Every accepted candidate strictly decreases its generator's measure().
#   The search re-checks this, so a custom relation cannot loop forever.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .outcomes import TrialOutcome
from .terms import Atom, TermKind, term_kind, term_measure

if TYPE_CHECKING:
    from .properties import Property

logger = logging.getLogger(__name__)

ATOM_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


# -----------------------------
# Relations
# -----------------------------

def _quot2(n: int) -> int:
    # integer halving rounded toward zero
    return n // 2 if n >= 0 else -((-n) // 2)


def shrink_integer(x: int, target: int = 0) -> Iterator[int]:
    """
    Integers strictly closer to target: target, then x - d/2, x - d/4, ..., x - 1.
    """
    i = x - target
    while i != 0:
        yield x - i
        i = _quot2(i)


def shrink_float(
    x: float,
    target: float = 0.0,
    lo: Optional[float] = None,
    hi: Optional[float] = None,
) -> Iterator[float]:
    d = x - target
    if d == 0:
        return
    yield target

    def _ok(c: float) -> bool:
        if lo is not None and c < lo:
            return False
        if hi is not None and c > hi:
            return False
        return abs(c - target) < abs(d)

    t = float(math.trunc(x))
    if t != x and _ok(t):
        yield t
    if abs(d) >= 1.0:
        half = target + d / 2
        if half != t and _ok(half):
            yield half


def shrink_sequence(
    items: Sequence[Any],
    shrink_elem: Callable[[Any], Iterator[Any]],
    min_length: int = 0,
) -> Iterator[List[Any]]:
    """
    Shorter sequences first (removing chunks of halving size), then
    same-length sequences with one element shrunk.
    """
    items = list(items)
    n = len(items)
    removable = n - min_length
    k = removable
    while k >= 1:
        for start in range(0, n - k + 1, k):
            yield items[:start] + items[start + k:]
        k //= 2

    for i, x in enumerate(items):
        for c in shrink_elem(x):
            yield items[:i] + [c] + items[i + 1:]


def shrink_atom_name(name: str, alphabet: str = ATOM_ALPHABET, min_length: int = 0) -> Iterator[str]:
    def _shrink_char(c: str) -> Iterator[str]:
        idx = alphabet.find(c)
        if idx < 0:
            yield alphabet[0]
            return
        for j in shrink_integer(idx):
            yield alphabet[j]

    for chars in shrink_sequence(list(name), _shrink_char, min_length=min_length):
        yield "".join(chars)


def shrink_binary(data: bytes) -> Iterator[bytes]:
    for seq in shrink_sequence(list(data), shrink_integer):
        yield bytes(seq)


def shrink_term(value: Any) -> Iterator[Any]:
    """
    Shrink relation for the general term generator.

    Order: the integer 0, direct sub-terms, structural shrinks of the
    container, then leaf-specific shrinks. Each candidate has a strictly
    smaller term_measure().
    """
    kind = term_kind(value)
    measure = term_measure(value)
    if term_measure(0) < measure:
        yield 0

    if kind in (TermKind.TUPLE, TermKind.LIST):
        rebuild = tuple if kind is TermKind.TUPLE else list
        for child in value:
            yield child
        for cand in shrink_sequence(list(value), shrink_term):
            yield rebuild(cand)
    elif kind is TermKind.INTEGER:
        for c in shrink_integer(value):
            if c != 0:
                yield c
    elif kind is TermKind.FLOAT:
        yield from shrink_float(value)
    elif kind is TermKind.ATOM:
        if isinstance(value, bool):
            if value:
                yield False
        else:
            for name in shrink_atom_name(value.name):
                yield Atom(name)
    elif kind is TermKind.BINARY:
        yield from shrink_binary(bytes(value))


# -----------------------------
# Search
# -----------------------------

@dataclass(frozen=True)
class ShrinkResult:
    raws: Tuple[Any, ...]
    outcome: TrialOutcome
    steps: int
    trajectory: Tuple[Dict[str, Any], ...]


class Shrinker:
    """
    Greedy minimization of a failing trial.

    For each bound variable in declaration order, walk its generator's
    candidates, holding the other variables fixed, and accept the first one
    that still fails. Accepting restarts that variable's candidate stream.
    Full passes repeat until a pass accepts nothing.
    """

    def __init__(
        self,
        prop: "Property",
        evaluate: Callable[[Tuple[Any, ...]], TrialOutcome],
        *,
        max_shrinks: int = 10_000,
    ):
        self.prop = prop
        self.evaluate = evaluate
        self.max_shrinks = max_shrinks

    def _first_failing(self, idx: int, current: List[Any]) -> Optional[Tuple[Any, TrialOutcome]]:
        gen = self.prop.bindings[idx][1]
        bound = gen.measure(current[idx])
        for cand in gen.shrink(current[idx]):
            if not gen.measure(cand) < bound:
                logger.debug("Skipping non-decreasing shrink candidate for %s", self.prop.bindings[idx][0])
                continue
            trial = list(current)
            trial[idx] = cand
            out = self.evaluate(tuple(trial))
            if out.failing:
                return cand, out
        return None

    def minimize(self, failing: TrialOutcome) -> ShrinkResult:
        if not failing.failing:
            raise ValueError(f"Cannot shrink a {failing.kind.value} outcome")

        current = list(failing.raws)
        best = failing
        steps = 0
        trajectory: List[Dict[str, Any]] = []

        progress = True
        while progress and steps < self.max_shrinks:
            progress = False
            for idx in range(len(current)):
                while steps < self.max_shrinks:
                    found = self._first_failing(idx, current)
                    if found is None:
                        break
                    current[idx], best = found
                    steps += 1
                    progress = True
                    trajectory.append(dict(best.bindings))
                    logger.debug("Shrink step %d: %s", steps, best.bindings)

        if steps >= self.max_shrinks:
            logger.warning("Shrinking stopped at max_shrinks=%d", self.max_shrinks)

        return ShrinkResult(
            raws=tuple(current),
            outcome=best,
            steps=steps,
            trajectory=tuple(trajectory),
        )
