#!/usr/bin/env python3
#===- tests/test_reporting_jsonl.py - Reporter And JSONL Tests -----------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

import io
from pathlib import Path

import pytest

from propcheck.driver import run_property
from propcheck.errors import GaveUp
from propcheck.generators import atoms, binaries, integers, lists
from propcheck.jsonl import (
    SCHEMA_VERSION,
    canonical_hash,
    make_record,
    read_jsonl,
    summarize_jsonl,
    validate_record,
    write_jsonl_records,
)
from propcheck.properties import for_all, implies
from propcheck.reporting import CollectingReporter, ConsoleReporter, JsonlReporter, MultiReporter


def test_canonical_hash_ignores_key_order() -> None:
    assert canonical_hash({"a": 1, "b": [1, 2]}) == canonical_hash({"b": [1, 2], "a": 1})
    assert canonical_hash({"a": 1}) != canonical_hash({"a": 2})


def test_make_record_hash_excludes_timestamp() -> None:
    payload = {"result": {"status": "PASSED"}}
    with_ts = make_record(payload)
    without_ts = make_record(payload, include_timestamp=False)
    assert with_ts["schema_version"] == SCHEMA_VERSION
    assert "timestamp" in with_ts and "timestamp" not in without_ts
    assert with_ts["hash"] == without_ts["hash"]


def test_write_and_read_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "out.jsonl"
    write_jsonl_records(str(path), [{"i": 0}, {"i": 1}])
    assert [r["i"] for r in read_jsonl(str(path))] == [0, 1]


def test_console_reporter_marks(tmp_path: Path) -> None:
    stream = io.StringIO()
    p = implies(lambda x: x != 0, for_all("x", integers(), lambda x: x < 4))
    run_property(p, 100, seed=4, reporter=ConsoleReporter(stream))
    out = stream.getvalue()
    assert out.startswith("<property> [seed=4]: ")
    assert "!" in out
    assert "Failed! Counterexample:" in out
    assert "Shrinking" in out


def test_jsonl_reporter_same_seed_same_hash(tmp_path: Path) -> None:
    path = tmp_path / "runs.jsonl"
    p = for_all("xs", lists(atoms()), lambda xs: len(xs) < 3)
    for _ in range(2):
        run_property(p, 100, seed=12, reporter=JsonlReporter(str(path), include_timestamp=False))
    first, second = read_jsonl(str(path))
    assert first["hash"] == second["hash"]
    validate_record(first)
    assert first["result"]["status"] == "FALSIFIED"
    assert len(first["result"]["shrunk"]["xs"]) == 3


def test_jsonl_reporter_records_gave_up(tmp_path: Path) -> None:
    path = tmp_path / "runs.jsonl"
    p = implies(lambda b: False, for_all("b", binaries(), lambda b: True))
    rep = MultiReporter(CollectingReporter(), JsonlReporter(str(path)))
    with pytest.raises(GaveUp):
        run_property(p, 3, seed=1, reporter=rep)
    (rec,) = read_jsonl(str(path))
    assert rec["result"]["status"] == "GAVE_UP"
    assert rec["result"]["seed"] == 1


def test_summarize_jsonl(tmp_path: Path) -> None:
    path = tmp_path / "runs.jsonl"
    rep = JsonlReporter(str(path), run_meta={"command": "test"})
    run_property(for_all("x", integers(), lambda x: True), 10, seed=1, reporter=rep)
    run_property(for_all("x", integers(), lambda x: x < 3), 100, seed=1, reporter=rep)
    summary = summarize_jsonl(str(path))
    assert summary["records"] == 2
    assert summary["passed"] == 1
    assert summary["failed"] == 1
    assert summary["by_status"] == {"PASSED": 1, "FALSIFIED": 1}
    records = read_jsonl(str(path))
    assert summary["shrink_steps_total"] == records[1]["result"]["shrink_steps"]
    assert records[0]["run_meta"] == {"command": "test"}


def test_result_to_dict_is_json_safe() -> None:
    result = run_property(for_all("xs", lists(atoms()), lambda xs: len(xs) < 2), 100, seed=3)
    d = result.to_dict()
    assert all(isinstance(a, str) for a in d["shrunk"]["xs"])
    assert d["property"] == "<property>"


def test_validate_record_detects_tampering() -> None:
    rec = make_record({"result": {"property": "p", "status": "PASSED"}, "run_meta": {}})
    validate_record(rec)
    rec["result"]["status"] = "FALSIFIED"
    with pytest.raises(ValueError):
        validate_record(rec)
    with pytest.raises(ValueError):
        validate_record({"result": {}})


def test_read_jsonl_reports_bad_lines(tmp_path: Path) -> None:
    path = tmp_path / "broken.jsonl"
    path.write_text('{"a": 1}\n\nnot json\n', encoding="utf-8")
    with pytest.raises(ValueError, match=":3:"):
        read_jsonl(str(path))
