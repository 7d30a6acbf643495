#!/usr/bin/env python3
#===- propcheck/config.py - Run Configuration ----------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Explicit configuration passed into the driver (no process-wide state).
#
# Size policy:
#   LINEAR: size = min_size + passed * (max_size - min_size) // num_trials
#           (grows with passed trials; discards do not change it)
#   FIXED:  size = max_size for every trial
#
# YAML:
#   load_run_config(path) deep-merges a YAML mapping over DEFAULT_CONFIG, e.g.
#
#     num_trials: 500
#     size: {policy: fixed, max_size: 20}
#     shrinking: {max_shrinks: 2000}
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class SizePolicy(str, Enum):
    LINEAR = "linear"
    FIXED = "fixed"


DEFAULT_NUM_TRIALS = 100

DEFAULT_CONFIG: Dict[str, Any] = {
    "num_trials": DEFAULT_NUM_TRIALS,
    "seed": None,
    "max_discard_ratio": 10,
    "seed_global_rng": True,
    "size": {
        "policy": SizePolicy.LINEAR.value,
        "min_size": 1,
        "max_size": 42,
    },
    "shrinking": {
        "enabled": True,
        "max_shrinks": 10_000,
    },
}


@dataclass(frozen=True)
class RunConfig:
    """
    Driver configuration.

    Notes:
      - seed=None means the engine picks a fresh seed per run and records it.
      - the discard budget is max_discard_ratio * num_trials.
    """
    num_trials: int = DEFAULT_NUM_TRIALS
    seed: Optional[int] = None
    max_discard_ratio: int = 10
    size_policy: SizePolicy = SizePolicy.LINEAR
    min_size: int = 1
    max_size: int = 42
    shrink: bool = True
    max_shrinks: int = 10_000
    seed_global_rng: bool = True

    def __post_init__(self):
        for field_name in ("num_trials", "max_discard_ratio", "min_size", "max_size", "max_shrinks"):
            value = getattr(self, field_name)
            # bool is an int subclass but never a meaningful count
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{field_name} must be an int, got {value!r}")
        if self.num_trials < 0:
            raise ValueError(f"num_trials must be a non-negative int, got {self.num_trials!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ValueError(f"seed must be int or None, got {self.seed!r}")
        if self.max_discard_ratio < 0:
            raise ValueError(f"max_discard_ratio must be >= 0, got {self.max_discard_ratio}")
        if not (0 <= self.min_size <= self.max_size):
            raise ValueError(f"need 0 <= min_size <= max_size, got {self.min_size}, {self.max_size}")
        if self.max_shrinks < 0:
            raise ValueError(f"max_shrinks must be >= 0, got {self.max_shrinks}")
        # accept the plain string form ("linear") as well as the enum
        object.__setattr__(self, "size_policy", SizePolicy(self.size_policy))

    @property
    def discard_budget(self) -> int:
        return int(self.max_discard_ratio * self.num_trials)

    def size_for(self, passed: int) -> int:
        if self.size_policy is SizePolicy.FIXED or self.num_trials == 0:
            return self.max_size
        grown = self.min_size + (passed * (self.max_size - self.min_size)) // self.num_trials
        return min(self.max_size, grown)

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_trials": int(self.num_trials),
            "seed": self.seed,
            "max_discard_ratio": self.max_discard_ratio,
            "seed_global_rng": bool(self.seed_global_rng),
            "size": {
                "policy": self.size_policy.value,
                "min_size": int(self.min_size),
                "max_size": int(self.max_size),
            },
            "shrinking": {
                "enabled": bool(self.shrink),
                "max_shrinks": int(self.max_shrinks),
            },
        }


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def config_from_dict(data: Dict[str, Any]) -> RunConfig:
    unknown = set(data or {}) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")
    merged = _deep_merge(DEFAULT_CONFIG, data or {})
    size = merged["size"]
    shrinking = merged["shrinking"]
    return RunConfig(
        num_trials=merged["num_trials"],
        seed=merged["seed"],
        max_discard_ratio=merged["max_discard_ratio"],
        seed_global_rng=bool(merged["seed_global_rng"]),
        size_policy=SizePolicy(str(size["policy"]).lower()),
        min_size=size["min_size"],
        max_size=size["max_size"],
        shrink=bool(shrinking["enabled"]),
        max_shrinks=shrinking["max_shrinks"],
    )


def load_run_config(path: Optional[str] = None, **overrides: Any) -> RunConfig:
    """Load a RunConfig from a YAML file (missing file -> defaults), then apply overrides."""
    data: Dict[str, Any] = {}
    if path is not None:
        cfg_path = Path(path)
        if cfg_path.exists():
            data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return config_from_dict(data).with_overrides(**overrides)
