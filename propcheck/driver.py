#!/usr/bin/env python3
#===- propcheck/driver.py - Property Run Driver --------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Run one property: RUNNING -> SHRINKING -> DONE.
#
#   RUNNING    draw + evaluate with one seeded random.Random for the whole
#              run; count passes up to num_trials; discards are retried
#              until the discard budget is exhausted (GaveUp).
#   SHRINKING  on the first FAIL/ERROR, minimize the failing raws.
#   DONE       build the RunResult.
#
# Reproducibility:
#   The run seed fixes the random.Random stream. Each attempt also gets a
#   derived seed (run seed, attempt index, property name) used to seed the
#   global random/numpy RNGs around predicate evaluation; re-evaluations
#   during shrinking reuse the failing attempt's seed.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Optional, Tuple

from .config import RunConfig
from .errors import GaveUp, GeneratorConfigurationError, PropertyFailed
from .outcomes import OutcomeKind, RunResult, RunStatus, TrialOutcome
from .properties import Property
from .reporting import LoggingReporter, Reporter
from .seeds import derive_seed, new_run_seed, seeded
from .shrink import Shrinker, ShrinkResult

logger = logging.getLogger(__name__)


class DriverState(str, Enum):
    RUNNING = "running"
    SHRINKING = "shrinking"
    DONE = "done"


class Driver:
    """State machine for a single property run."""

    def __init__(self, prop: Property, config: RunConfig, reporter: Optional[Reporter] = None):
        if not isinstance(prop, Property):
            raise GeneratorConfigurationError(f"expected a Property, got {type(prop)}")
        self.prop = prop
        self.config = config
        self.reporter = reporter or LoggingReporter()
        self.state = DriverState.RUNNING

    def _transition(self, state: DriverState) -> None:
        logger.debug("%s: %s -> %s", self.prop.name, self.state.value, state.value)
        self.state = state

    def _check(self, raws: Tuple[Any, ...], trial_seed: int) -> TrialOutcome:
        if not self.config.seed_global_rng:
            return self.prop.check(raws)
        with seeded(trial_seed):
            return self.prop.check(raws)

    def run(self) -> RunResult:
        cfg = self.config
        prop = self.prop
        seed = cfg.seed if cfg.seed is not None else new_run_seed()
        rng = random.Random(seed)

        self.state = DriverState.RUNNING
        self.reporter.on_start(prop, cfg, seed)

        passed = 0
        discarded = 0
        attempt = 0
        failing: Optional[TrialOutcome] = None
        trial_seed = 0

        while passed < cfg.num_trials:
            size = cfg.size_for(passed)
            trial_seed = derive_seed(seed, attempt, prop.name)
            outcome = self._check(prop.draw(size, rng), trial_seed)
            self.reporter.on_trial(outcome.kind)

            if outcome.kind is OutcomeKind.PASS:
                passed += 1
            elif outcome.kind is OutcomeKind.DISCARD:
                discarded += 1
                if discarded > cfg.discard_budget:
                    self._transition(DriverState.DONE)
                    err = GaveUp(prop.name, passed, discarded, cfg.num_trials, seed=seed)
                    self.reporter.on_abort(prop.name, RunStatus.GAVE_UP, err)
                    raise err
            else:
                failing = outcome
                break
            attempt += 1

        if failing is None:
            self._transition(DriverState.DONE)
            result = RunResult(
                property_name=prop.name,
                status=RunStatus.PASSED,
                seed=seed,
                num_trials=cfg.num_trials,
                passed=passed,
                discarded=discarded,
            )
            self.reporter.on_finish(result)
            return result

        self.reporter.on_failure(failing)

        if cfg.shrink:
            self._transition(DriverState.SHRINKING)
            failing_seed = trial_seed
            shrinker = Shrinker(
                prop,
                lambda raws: self._check(raws, failing_seed),
                max_shrinks=cfg.max_shrinks,
            )
            shrunk = shrinker.minimize(failing)
        else:
            shrunk = ShrinkResult(raws=failing.raws, outcome=failing, steps=0, trajectory=())

        self._transition(DriverState.DONE)
        final = shrunk.outcome
        result = RunResult(
            property_name=prop.name,
            status=RunStatus.FALSIFIED if final.kind is OutcomeKind.FAIL else RunStatus.ERROR,
            seed=seed,
            num_trials=cfg.num_trials,
            passed=passed,
            discarded=discarded,
            counterexample=dict(failing.bindings),
            shrunk=dict(final.bindings),
            shrink_steps=shrunk.steps,
            trajectory=shrunk.trajectory,
            error=final.error,
            failing_attempt=attempt,
        )
        self.reporter.on_shrunk(result)
        self.reporter.on_finish(result)
        return result


def run_property(
    prop: Property,
    num_trials: Optional[int] = None,
    *,
    seed: Optional[int] = None,
    config: Optional[RunConfig] = None,
    reporter: Optional[Reporter] = None,
) -> RunResult:
    """
    Run a property and return its RunResult.

    Args:
        prop: the property
        num_trials: passing trials required (default 100 via RunConfig)
        seed: explicit seed for reproducibility (default: engine-chosen)
        config: base configuration; num_trials/seed override it when given
        reporter: progress reporter (default: LoggingReporter)

    Raises:
        GaveUp: discard budget exhausted before num_trials passes
        GeneratorConfigurationError: prop is not a valid Property
    """
    cfg = (config or RunConfig()).with_overrides(num_trials=num_trials, seed=seed)
    return Driver(prop, cfg, reporter).run()


def assert_property(prop: Property, num_trials: Optional[int] = None, **kwargs: Any) -> RunResult:
    """run_property, raising PropertyFailed (an AssertionError) unless the run passes."""
    result = run_property(prop, num_trials, **kwargs)
    if result.failed:
        raise PropertyFailed(result.describe(), result)
    return result
