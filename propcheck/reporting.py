#!/usr/bin/env python3
#===- propcheck/reporting.py - Progress Reporters ------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Progress signals emitted by the driver, in trial order:
#     on_start    once per property run
#     on_trial    after every trial (PASS / DISCARD / FAIL / ERROR)
#     on_failure  with the original counterexample
#     on_shrunk   with the shrunk result
#     on_finish   with the final RunResult
#     on_abort    when the run is aborted (gave up, bad declaration)
#
#   The driver owns none of the presentation.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List, Optional, TextIO, Tuple

from .jsonl import append_jsonl_record, make_record
from .outcomes import OutcomeKind, RunResult, RunStatus, TrialOutcome, _json_safe

if TYPE_CHECKING:
    from .config import RunConfig
    from .properties import Property

logger = logging.getLogger(__name__)


class Reporter:
    """Base reporter: every hook is a no-op."""

    def on_start(self, prop: "Property", config: "RunConfig", seed: int) -> None:
        pass

    def on_trial(self, kind: OutcomeKind) -> None:
        pass

    def on_failure(self, outcome: TrialOutcome) -> None:
        pass

    def on_shrunk(self, result: RunResult) -> None:
        pass

    def on_finish(self, result: RunResult) -> None:
        pass

    def on_abort(self, name: str, status: RunStatus, error: BaseException) -> None:
        pass


class LoggingReporter(Reporter):
    """Default reporter: one log line per run, details at DEBUG."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def on_start(self, prop, config, seed) -> None:
        self.log.debug("Running %s (trials=%d, seed=%d)", prop.name, config.num_trials, seed)

    def on_failure(self, outcome: TrialOutcome) -> None:
        self.log.info("Counterexample found: %s", _json_safe(outcome.bindings))

    def on_shrunk(self, result: RunResult) -> None:
        self.log.info(
            "Shrunk %d time(s) to: %s", result.shrink_steps, _json_safe(result.shrunk)
        )

    def on_finish(self, result: RunResult) -> None:
        if result.failed:
            self.log.warning("%s", result.describe())
        else:
            self.log.info("%s", result.describe())

    def on_abort(self, name, status, error) -> None:
        self.log.error("%s: %s (%s)", name, status.value, error)


_MARKS = {
    OutcomeKind.PASS: ".",
    OutcomeKind.DISCARD: "x",
    OutcomeKind.FAIL: "!",
    OutcomeKind.ERROR: "E",
}


class ConsoleReporter(Reporter):
    """Dot-per-trial progress for terminals."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def on_start(self, prop, config, seed) -> None:
        self._write(f"{prop.name} [seed={seed}]: ")

    def on_trial(self, kind: OutcomeKind) -> None:
        self._write(_MARKS[kind])

    def on_failure(self, outcome: TrialOutcome) -> None:
        self._write(f"\nFailed! Counterexample: {_json_safe(outcome.bindings)}")
        if outcome.error is not None:
            self._write(f"\n  raised {_json_safe(outcome.error)}")

    def on_shrunk(self, result: RunResult) -> None:
        self._write(f"\nShrinking ({result.shrink_steps} time(s)): {_json_safe(result.shrunk)}")

    def on_finish(self, result: RunResult) -> None:
        if result.failed:
            self._write("\n")
        else:
            self._write(f"\nOK: passed {result.passed} tests ({result.discarded} discarded)\n")

    def on_abort(self, name, status, error) -> None:
        self._write(f"\n{status.value}: {error}\n")


class CollectingReporter(Reporter):
    """Keeps every signal in memory, in emission order."""

    def __init__(self):
        self.signals: List[Tuple[str, Any]] = []
        self.trials: List[OutcomeKind] = []
        self.results: List[RunResult] = []

    def on_start(self, prop, config, seed) -> None:
        self.signals.append(("start", prop.name))

    def on_trial(self, kind: OutcomeKind) -> None:
        self.trials.append(kind)
        self.signals.append(("trial", kind))

    def on_failure(self, outcome: TrialOutcome) -> None:
        self.signals.append(("failure", dict(outcome.bindings)))

    def on_shrunk(self, result: RunResult) -> None:
        self.signals.append(("shrunk", (dict(result.shrunk or {}), result.shrink_steps)))

    def on_finish(self, result: RunResult) -> None:
        self.results.append(result)
        self.signals.append(("finish", result.status))

    def on_abort(self, name, status, error) -> None:
        self.signals.append(("abort", status))


class JsonlReporter(Reporter):
    """Appends one audit record per finished or aborted property run."""

    def __init__(self, path: str, run_meta: Optional[Dict[str, Any]] = None, include_timestamp: bool = True):
        self.path = path
        self.run_meta = dict(run_meta or {})
        self.include_timestamp = include_timestamp

    def _emit(self, result: Dict[str, Any]) -> None:
        payload = {"result": result, "run_meta": self.run_meta}
        append_jsonl_record(self.path, make_record(payload, include_timestamp=self.include_timestamp))

    def on_finish(self, result: RunResult) -> None:
        self._emit(result.to_dict())

    def on_abort(self, name, status, error) -> None:
        self._emit({
            "property": name,
            "status": status.value,
            "seed": getattr(error, "seed", None),
            "error": _json_safe(error),
        })


class MultiReporter(Reporter):
    """Fan signals out to several reporters."""

    def __init__(self, *reporters: Reporter):
        self.reporters = reporters

    def on_start(self, prop, config, seed) -> None:
        for r in self.reporters:
            r.on_start(prop, config, seed)

    def on_trial(self, kind) -> None:
        for r in self.reporters:
            r.on_trial(kind)

    def on_failure(self, outcome) -> None:
        for r in self.reporters:
            r.on_failure(outcome)

    def on_shrunk(self, result) -> None:
        for r in self.reporters:
            r.on_shrunk(result)

    def on_finish(self, result) -> None:
        for r in self.reporters:
            r.on_finish(result)

    def on_abort(self, name, status, error) -> None:
        for r in self.reporters:
            r.on_abort(name, status, error)
