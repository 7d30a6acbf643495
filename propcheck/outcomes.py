#!/usr/bin/env python3
#===- propcheck/outcomes.py - Trial And Run Result Types -----------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .terms import Atom, format_term


class OutcomeKind(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    DISCARD = "DISCARD"
    ERROR = "ERROR"

    @property
    def failing(self) -> bool:
        return self in (OutcomeKind.FAIL, OutcomeKind.ERROR)


class RunStatus(str, Enum):
    PASSED = "PASSED"
    FALSIFIED = "FALSIFIED"
    ERROR = "ERROR"
    GAVE_UP = "GAVE_UP"
    CONFIG_ERROR = "CONFIG_ERROR"
    ABORTED = "ABORTED"


def _json_safe(obj: Any) -> Any:
    """Convert bound values / payloads to JSON-safe values for auditing."""
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (Atom, bytes, bytearray)):
        return format_term(obj)
    if isinstance(obj, (list, tuple)):
        return [_json_safe(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, BaseException):
        return f"{type(obj).__name__}: {obj}"
    if hasattr(obj, "to_dict") and callable(getattr(obj, "to_dict")):
        return _json_safe(obj.to_dict())
    return repr(obj)


@dataclass(frozen=True)
class TrialOutcome:
    """
    Result of one generate-and-evaluate attempt.

    bindings holds the realized values by variable name, raws the generator
    samples they were realized from (same order as the property bindings).
    """
    kind: OutcomeKind
    bindings: Dict[str, Any] = field(default_factory=dict)
    raws: Tuple[Any, ...] = ()
    error: Optional[BaseException] = None

    @property
    def failing(self) -> bool:
        return self.kind.failing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "bindings": _json_safe(self.bindings),
            "error": _json_safe(self.error),
        }


@dataclass(frozen=True)
class RunResult:
    """Aggregate over the trials of one property run."""
    property_name: str
    status: RunStatus
    seed: Optional[int]
    num_trials: int
    passed: int = 0
    discarded: int = 0
    counterexample: Optional[Dict[str, Any]] = None
    shrunk: Optional[Dict[str, Any]] = None
    shrink_steps: int = 0
    trajectory: Tuple[Dict[str, Any], ...] = ()
    error: Optional[BaseException] = None
    failing_attempt: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.status is not RunStatus.PASSED

    def describe(self) -> str:
        if self.status is RunStatus.PASSED:
            return f"{self.property_name}: OK, passed {self.passed} tests ({self.discarded} discarded)"
        if self.status in (RunStatus.FALSIFIED, RunStatus.ERROR):
            shrunk = ", ".join(f"{k} = {_show(v)}" for k, v in (self.shrunk or {}).items())
            head = "falsified" if self.status is RunStatus.FALSIFIED else f"raised {_json_safe(self.error)}"
            return (
                f"{self.property_name}: {head} after {self.passed + 1} tests, "
                f"shrunk {self.shrink_steps} time(s) to: {shrunk} (seed={self.seed})"
            )
        return f"{self.property_name}: {self.status.value} {_json_safe(self.error) or ''}".rstrip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "property": self.property_name,
            "status": self.status.value,
            "seed": self.seed,
            "num_trials": int(self.num_trials),
            "passed": int(self.passed),
            "discarded": int(self.discarded),
            "counterexample": _json_safe(self.counterexample),
            "shrunk": _json_safe(self.shrunk),
            "shrink_steps": int(self.shrink_steps),
            "error": _json_safe(self.error),
            "failing_attempt": self.failing_attempt,
        }


def _show(value: Any) -> str:
    try:
        return format_term(value)
    except TypeError:
        return repr(value)


@dataclass(frozen=True, order=True)
class PropertyRef:
    """Stable reference to a property discovered in a module."""
    module: str
    name: str

    def __str__(self) -> str:
        return f"{self.module}:{self.name}"


@dataclass(frozen=True)
class ModuleResult:
    """Ordered (reference, result) pairs for every property of a module."""
    module: str
    entries: Tuple[Tuple[PropertyRef, RunResult], ...] = ()

    def failures(self) -> List[PropertyRef]:
        return [ref for ref, res in self.entries if res.failed]

    @property
    def ok(self) -> bool:
        return not self.failures()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "properties": [
                {"ref": str(ref), **res.to_dict()} for ref, res in self.entries
            ],
            "failures": [str(ref) for ref in self.failures()],
        }
