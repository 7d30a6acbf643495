#!/usr/bin/env python3
#===- propcheck/jsonl.py - JSONL Run Records -----------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Record layout (one line per property run):
#
#   {"schema_version": "propcheck.run.v1",
#    "result":   RunResult.to_dict() or an abort summary,
#    "run_meta": {...},
#    "hash":     sha256 over the canonical payload,
#    "timestamp": optional, never hashed}
#
# Two runs of the same property with the same seed hash identically.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import hashlib
import json
import time
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List

SCHEMA_VERSION = "propcheck.run.v1"

VOLATILE_KEYS: FrozenSet[str] = frozenset({"timestamp", "timing"})
_RECORD_KEYS = ("schema_version", "result", "hash")


def _without_volatile(obj: Any, drop: FrozenSet[str]) -> Any:
    if isinstance(obj, list):
        return [_without_volatile(v, drop) for v in obj]
    if not isinstance(obj, dict):
        return obj
    return {k: _without_volatile(v, drop) for k, v in obj.items() if k not in drop}


def canonical_hash(obj: Any, drop: FrozenSet[str] = VOLATILE_KEYS) -> str:
    """SHA256 of obj as sorted, compact, ASCII JSON, volatile keys removed."""
    text = json.dumps(
        _without_volatile(obj, drop), sort_keys=True, separators=(",", ":"), ensure_ascii=True
    )
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def make_record(payload: Dict[str, Any], include_timestamp: bool = True) -> Dict[str, Any]:
    """Wrap a payload as a versioned record; the hash never covers the timestamp."""
    record = {"schema_version": SCHEMA_VERSION, **payload, "hash": canonical_hash(payload)}
    if include_timestamp:
        record["timestamp"] = time.time()
    return record


def validate_record(record: Dict[str, Any]) -> None:
    """Raise ValueError if a record is malformed or its hash does not match."""
    missing = [k for k in _RECORD_KEYS if k not in record]
    if missing:
        raise ValueError(f"JSONL record missing keys: {missing}")
    if record["schema_version"] != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema_version: {record['schema_version']!r}")
    payload = {k: v for k, v in record.items() if k not in ("schema_version", "hash")}
    if canonical_hash(payload) != record["hash"]:
        raise ValueError(f"JSONL record hash mismatch for {record['result'].get('property')!r}")


def write_jsonl_records(path: str, records: Iterable[Dict[str, Any]], *, append: bool = False) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("a" if append else "w", encoding="utf-8") as f:
        f.writelines(json.dumps(rec, ensure_ascii=True) + "\n" for rec in records)


def append_jsonl_record(path: str, record: Dict[str, Any]) -> None:
    write_jsonl_records(path, [record], append=True)


def iter_jsonl(path: str) -> Iterator[Dict[str, Any]]:
    with Path(path).open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{lineno}: invalid JSON record ({exc})") from exc


def read_jsonl(path: str) -> List[Dict[str, Any]]:
    return list(iter_jsonl(path))


def summarize_jsonl(path: str) -> Dict[str, Any]:
    """Status counts over the run records of a file, for CI logs."""
    by_status: Dict[str, int] = {}
    shrink_steps = 0
    total = 0
    for rec in iter_jsonl(path):
        total += 1
        result = rec.get("result", {})
        status = result.get("status", "UNKNOWN")
        by_status[status] = by_status.get(status, 0) + 1
        shrink_steps += int(result.get("shrink_steps") or 0)
    passed = by_status.get("PASSED", 0)
    return {
        "records": total,
        "passed": passed,
        "failed": total - passed,
        "by_status": by_status,
        "shrink_steps_total": shrink_steps,
    }
