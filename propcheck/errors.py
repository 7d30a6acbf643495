#!/usr/bin/env python3
#===- propcheck/errors.py - Exception Taxonomy ---------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Notes:
#   Discards, falsifications and predicate errors are trial outcomes
#   (see outcomes.py), not exceptions. Only conditions that abort a run
#   are raised.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

from typing import Any, Optional


class PropcheckError(Exception):
    """Base class for all engine errors."""


class GeneratorConfigurationError(PropcheckError, ValueError):
    """A generator or property declaration is malformed or unsatisfiable."""


class GaveUp(PropcheckError):
    """Too many discarded trials before reaching the trial target."""

    def __init__(
        self,
        property_name: str,
        passed: int,
        discarded: int,
        num_trials: int,
        seed: Optional[int] = None,
    ):
        self.property_name = property_name
        self.passed = passed
        self.discarded = discarded
        self.num_trials = num_trials
        self.seed = seed
        super().__init__(
            f"Gave up on {property_name} after {passed}/{num_trials} passed trials "
            f"and {discarded} discards"
        )


class PropertyFailed(PropcheckError, AssertionError):
    """Raised by assert_property when a run does not pass."""

    def __init__(self, message: str, result: Optional[Any] = None):
        self.result = result
        super().__init__(message)
