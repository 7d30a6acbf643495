#!/usr/bin/env python3
#===- propcheck/__init__.py - propcheck Public API -----------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Property-based testing: declare properties over generated values, run
#   them for a number of trials and get a shrunk counterexample back when
#   one fails.
#
#     from propcheck import for_all, integers, lists, run_property
#
#     p = for_all("xs", lists(integers()), lambda xs: sorted(sorted(xs)) == sorted(xs))
#     run_property(p, 100, seed=1)
#
#===---------------------------------------------------------------------===#

from .terms import Atom, TermKind, format_term, is_term, term_depth, term_kind, term_measure

from .errors import GaveUp, GeneratorConfigurationError, PropcheckError, PropertyFailed

from .generators import (
    Generator,
    atoms,
    binaries,
    booleans,
    elements,
    floats,
    frequency,
    integers,
    just,
    let_,
    lists,
    non_empty,
    one_of,
    resize,
    sized,
    terms,
    text,
    tuples,
    vectors,
)

from .properties import Property, for_all, implies, prop
from .outcomes import ModuleResult, OutcomeKind, PropertyRef, RunResult, RunStatus, TrialOutcome
from .config import RunConfig, SizePolicy, load_run_config
from .seeds import derive_seed, seed_everything, seeded
from .reporting import (
    CollectingReporter,
    ConsoleReporter,
    JsonlReporter,
    LoggingReporter,
    MultiReporter,
    Reporter,
)
from .driver import Driver, assert_property, run_property
from .modules import check_module, discover_properties, run_module
from .logsetup import init_logging

__all__ = [
    # terms
    "Atom",
    "TermKind",
    "format_term",
    "is_term",
    "term_depth",
    "term_kind",
    "term_measure",
    # errors
    "GaveUp",
    "GeneratorConfigurationError",
    "PropcheckError",
    "PropertyFailed",
    # generators
    "Generator",
    "atoms",
    "binaries",
    "booleans",
    "elements",
    "floats",
    "frequency",
    "integers",
    "just",
    "let_",
    "lists",
    "non_empty",
    "one_of",
    "resize",
    "sized",
    "terms",
    "text",
    "tuples",
    "vectors",
    # properties
    "Property",
    "for_all",
    "implies",
    "prop",
    # results
    "ModuleResult",
    "OutcomeKind",
    "PropertyRef",
    "RunResult",
    "RunStatus",
    "TrialOutcome",
    # config / seeds
    "RunConfig",
    "SizePolicy",
    "load_run_config",
    "derive_seed",
    "seed_everything",
    "seeded",
    # reporting
    "CollectingReporter",
    "ConsoleReporter",
    "JsonlReporter",
    "LoggingReporter",
    "MultiReporter",
    "Reporter",
    # running
    "Driver",
    "assert_property",
    "run_property",
    "check_module",
    "discover_properties",
    "run_module",
    "init_logging",
    # cli (lazy)
    "main",
]


# Lazy exports (avoid runpy double-import warning when running as -m)
# ----
def __getattr__(name: str):
    if name == "main":
        from .cli import main as _main
        return _main
    raise AttributeError(name)


def __dir__():
    return sorted(list(globals().keys()) + ["main"])
