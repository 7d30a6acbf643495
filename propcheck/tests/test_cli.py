#!/usr/bin/env python3
#===- tests/test_cli.py - CLI Tests --------------------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

from pathlib import Path

import pytest

from propcheck.cli import main
from propcheck.jsonl import read_jsonl


def test_cli_reports_failing_properties(sample_module: str, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    out_jsonl = tmp_path / "runs.jsonl"
    code = main([
        sample_module,
        "--seed", "1",
        "--trials", "50",
        "--jsonl", str(out_jsonl),
    ])
    assert code == 1
    out = capsys.readouterr().out
    assert f"{sample_module}:prop_dedup_sort_keeps_length" in out
    records = read_jsonl(str(out_jsonl))
    assert [r["result"]["status"] for r in records] == ["PASSED", "FALSIFIED"]
    assert records[0]["run_meta"]["config"]["num_trials"] == 50


def test_cli_prefix_selects_passing_property(sample_module: str) -> None:
    assert main([sample_module, "--prefix", "prop_sort", "--seed", "2", "--quiet"]) == 0


def test_cli_config_file(sample_module: str, tmp_path: Path) -> None:
    cfg = tmp_path / "run.yaml"
    cfg.write_text("num_trials: 20\nsize: {policy: fixed}\n", encoding="utf-8")
    code = main([sample_module, "--prefix", "prop_sort", "--config", str(cfg), "--quiet"])
    assert code == 0


def test_cli_usage_errors(tmp_path: Path) -> None:
    assert main([]) == 2
    assert main(["propcheck_no_such_module_xyz"]) == 2
    assert main(["json", "--size-policy", "quadratic"]) == 2
    bad = tmp_path / "bad.yaml"
    bad.write_text("unknown_key: 1\n", encoding="utf-8")
    assert main(["json", "--config", str(bad)]) == 2
    assert main(["json", "--log-level", "LOUD"]) == 2
    assert main(["json", "--config", str(tmp_path / "missing.yaml")]) == 2


def test_cli_module_without_properties_passes() -> None:
    assert main(["json", "--quiet"]) == 0
