#!/usr/bin/env python3
#===- propcheck/modules.py - Module-Level Property Runs -------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Discover every property a module defines under a name prefix
#   (default "prop_"), run them in definition order and collect the
#   references of the ones that did not pass.
#
#   A module attribute counts as a property if it is
#     - a Property object declared in that module, or
#     - a function defined in that module, callable with no arguments,
#       that returns a Property when called.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import importlib
import inspect
import logging
from types import ModuleType
from typing import Any, Callable, List, Optional, Tuple, Union

from .config import RunConfig
from .driver import Driver
from .errors import GaveUp, GeneratorConfigurationError
from .outcomes import ModuleResult, PropertyRef, RunResult, RunStatus
from .properties import Property
from .reporting import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "prop_"

ModuleLike = Union[str, ModuleType]


def _load_module(module: ModuleLike) -> ModuleType:
    if isinstance(module, ModuleType):
        return module
    if isinstance(module, str):
        return importlib.import_module(module)
    raise TypeError(f"expected a module or module name, got {type(module)}")


def _is_property_factory(obj: Any, module: ModuleType) -> bool:
    if not inspect.isfunction(obj) or obj.__module__ != module.__name__:
        return False
    params = inspect.signature(obj).parameters.values()
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in params
    )


def discover_properties(module: ModuleLike, prefix: str = DEFAULT_PREFIX) -> List[Tuple[PropertyRef, Any]]:
    """(ref, Property-or-factory) pairs in definition order."""
    mod = _load_module(module)
    found: List[Tuple[PropertyRef, Any]] = []
    for name, obj in vars(mod).items():
        if not name.startswith(prefix):
            continue
        if isinstance(obj, Property):
            # imported properties belong to (and run with) their own module
            if obj.module not in (None, mod.__name__):
                continue
            found.append((PropertyRef(mod.__name__, name), obj))
        elif _is_property_factory(obj, mod):
            found.append((PropertyRef(mod.__name__, name), obj))
    return found


def _resolve(ref: PropertyRef, obj: Union[Property, Callable[[], Any]]) -> Property:
    prop = obj if isinstance(obj, Property) else obj()
    if not isinstance(prop, Property):
        raise GeneratorConfigurationError(
            f"{ref} did not produce a Property (got {type(prop).__name__})"
        )
    return prop.with_name(ref.name)


def _aborted(ref: PropertyRef, status: RunStatus, cfg: RunConfig, exc: Exception) -> RunResult:
    return RunResult(
        property_name=ref.name,
        status=status,
        seed=getattr(exc, "seed", cfg.seed),
        num_trials=cfg.num_trials,
        passed=getattr(exc, "passed", 0),
        discarded=getattr(exc, "discarded", 0),
        error=exc,
    )


def check_module(
    module: ModuleLike,
    prefix: str = DEFAULT_PREFIX,
    *,
    config: Optional[RunConfig] = None,
    reporter: Optional[Reporter] = None,
) -> ModuleResult:
    """
    Run every discovered property of a module.

    GaveUp, GeneratorConfigurationError and any other exception raised
    while building or running a property (a factory or a let_ transform
    that raises) are recorded per property as GAVE_UP / CONFIG_ERROR /
    ABORTED and do not stop the remaining runs.
    """
    mod = _load_module(module)
    cfg = config or RunConfig()
    rep = reporter or LoggingReporter()
    entries: List[Tuple[PropertyRef, RunResult]] = []

    for ref, obj in discover_properties(mod, prefix):
        try:
            prop = _resolve(ref, obj)
            result = Driver(prop, cfg, rep).run()
        except GaveUp as exc:
            result = _aborted(ref, RunStatus.GAVE_UP, cfg, exc)
        except GeneratorConfigurationError as exc:
            logger.error("%s: invalid property declaration: %s", ref, exc)
            rep.on_abort(ref.name, RunStatus.CONFIG_ERROR, exc)
            result = _aborted(ref, RunStatus.CONFIG_ERROR, cfg, exc)
        except Exception as exc:
            logger.error("%s: aborted: %s: %s", ref, type(exc).__name__, exc)
            rep.on_abort(ref.name, RunStatus.ABORTED, exc)
            result = _aborted(ref, RunStatus.ABORTED, cfg, exc)
        entries.append((ref, result))

    out = ModuleResult(mod.__name__, tuple(entries))
    logger.info(
        "%s: %d properties, %d failed", mod.__name__, len(out.entries), len(out.failures())
    )
    return out


def run_module(
    module: ModuleLike,
    prefix: str = DEFAULT_PREFIX,
    *,
    config: Optional[RunConfig] = None,
    reporter: Optional[Reporter] = None,
) -> List[PropertyRef]:
    """Run a module's properties; returns the failing references (empty when all pass)."""
    return check_module(module, prefix, config=config, reporter=reporter).failures()
