#!/usr/bin/env python3
#===- tests/test_config.py - Run Configuration Tests ---------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

from pathlib import Path

import pytest

from propcheck.config import DEFAULT_CONFIG, RunConfig, SizePolicy, config_from_dict, load_run_config


def test_defaults() -> None:
    cfg = RunConfig()
    assert cfg.num_trials == 100
    assert cfg.seed is None
    assert cfg.size_policy is SizePolicy.LINEAR
    assert cfg.discard_budget == 1000
    assert config_from_dict({}) == cfg
    assert cfg.to_dict() == DEFAULT_CONFIG


def test_linear_size_grows_with_passed_trials() -> None:
    cfg = RunConfig(num_trials=100, min_size=1, max_size=42)
    sizes = [cfg.size_for(p) for p in range(100)]
    assert sizes[0] == 1
    assert sizes == sorted(sizes)
    assert max(sizes) <= 42


def test_fixed_size_policy_from_string() -> None:
    cfg = RunConfig(size_policy="fixed", max_size=9)
    assert cfg.size_policy is SizePolicy.FIXED
    assert {cfg.size_for(p) for p in range(10)} == {9}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_trials": -1},
        {"max_discard_ratio": -1},
        {"min_size": 5, "max_size": 2},
        {"max_shrinks": -3},
        {"seed": "abc"},
        {"size_policy": "exponential"},
        {"max_size": 10.5},
        {"min_size": True},
        {"max_shrinks": 2.0},
        {"max_discard_ratio": 1.5},
        {"num_trials": "100"},
        {"seed": False},
    ],
)
def test_invalid_config_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        RunConfig(**kwargs)


def test_config_from_dict_rejects_non_int_sizes(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="max_size"):
        config_from_dict({"size": {"max_size": 10.5}, "seed": 1})
    path = tmp_path / "run.yaml"
    path.write_text("shrinking:\n  max_shrinks: yes\n", encoding="utf-8")
    with pytest.raises(ValueError, match="max_shrinks"):
        load_run_config(str(path))


def test_with_overrides_ignores_none() -> None:
    cfg = RunConfig(num_trials=7).with_overrides(num_trials=None, seed=4)
    assert cfg.num_trials == 7
    assert cfg.seed == 4


def test_load_run_config_yaml_deep_merge(tmp_path: Path) -> None:
    path = tmp_path / "run.yaml"
    path.write_text(
        "num_trials: 250\nsize:\n  policy: FIXED\n  max_size: 20\nshrinking:\n  max_shrinks: 50\n",
        encoding="utf-8",
    )
    cfg = load_run_config(str(path), seed=11)
    assert cfg.num_trials == 250
    assert cfg.size_policy is SizePolicy.FIXED
    assert cfg.min_size == 1
    assert cfg.max_size == 20
    assert cfg.max_shrinks == 50
    assert cfg.shrink is True
    assert cfg.seed == 11


def test_load_run_config_missing_file_uses_defaults(tmp_path: Path) -> None:
    assert load_run_config(str(tmp_path / "absent.yaml")) == RunConfig()


def test_load_run_config_rejects_bad_documents(tmp_path: Path) -> None:
    bad_keys = tmp_path / "bad.yaml"
    bad_keys.write_text("trials: 5\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(str(bad_keys))
    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(str(not_mapping))
