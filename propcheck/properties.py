#!/usr/bin/env python3
#===- propcheck/properties.py - Property Combinators ---------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   A Property binds named variables to generators and evaluates a boolean
#   predicate over the bound values, optionally gated by a precondition.
#
#   for_all(name, gen, body)   binds one variable (nesting prepends)
#   implies(precondition, body) discards trials whose precondition is false
#   prop(**gens)               decorator form
#
#   Predicates and preconditions are called with the bound values as
#   keyword arguments.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import inspect
import logging
import random
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import GeneratorConfigurationError
from .generators import Generator
from .outcomes import OutcomeKind, TrialOutcome

logger = logging.getLogger(__name__)

Binding = Tuple[str, Generator]
Predicate = Callable[..., Any]

ANONYMOUS = "<property>"


def _declaring_module() -> Optional[str]:
    # first caller frame outside the engine modules (propcheck.<name>)
    frame = inspect.currentframe()
    try:
        while frame is not None:
            name = frame.f_globals.get("__name__", "")
            if name != "propcheck" and name.rpartition(".")[0] != "propcheck":
                return name
            frame = frame.f_back
        return None
    finally:
        del frame


def _validate_bindings(bindings: Sequence[Any]) -> Tuple[Binding, ...]:
    out = []
    seen = set()
    for pair in bindings:
        if not isinstance(pair, tuple) or len(pair) != 2:
            raise GeneratorConfigurationError(f"binding must be a (name, generator) pair, got {pair!r}")
        name, gen = pair
        if not isinstance(name, str) or not name.isidentifier():
            raise GeneratorConfigurationError(f"variable name must be an identifier, got {name!r}")
        if name in seen:
            raise GeneratorConfigurationError(f"variable {name!r} bound twice")
        if not isinstance(gen, Generator):
            raise GeneratorConfigurationError(f"variable {name!r} must be bound to a Generator, got {type(gen)}")
        seen.add(name)
        out.append((name, gen))
    return tuple(out)


class Property:
    """
    Executable predicate over generated values.

    Immutable: combinators return new Property objects.
    """

    def __init__(
        self,
        bindings: Sequence[Binding],
        predicate: Predicate,
        precondition: Optional[Predicate] = None,
        name: Optional[str] = None,
        module: Optional[str] = None,
    ):
        if not callable(predicate):
            raise GeneratorConfigurationError(f"predicate must be callable, got {type(predicate)}")
        if precondition is not None and not callable(precondition):
            raise GeneratorConfigurationError(f"precondition must be callable, got {type(precondition)}")
        self.bindings = _validate_bindings(bindings)
        self.predicate = predicate
        self.precondition = precondition
        self.name = name or getattr(predicate, "__name__", None) or ANONYMOUS
        if self.name == "<lambda>":
            self.name = ANONYMOUS
        # module the property was declared in; module runs skip imported ones
        self.module = module or _declaring_module()

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.bindings)

    def with_name(self, name: str) -> "Property":
        return Property(self.bindings, self.predicate, self.precondition, name, self.module)

    def draw(self, size: int, rng: random.Random) -> Tuple[Any, ...]:
        return tuple(gen.draw(size, rng) for _, gen in self.bindings)

    def realize(self, raws: Sequence[Any]) -> Dict[str, Any]:
        return {name: gen.realize(raw) for (name, gen), raw in zip(self.bindings, raws)}

    def check(self, raws: Sequence[Any]) -> TrialOutcome:
        """Evaluate the property on fixed raw samples."""
        raws = tuple(raws)
        values = self.realize(raws)

        if self.precondition is not None:
            try:
                holds = self.precondition(**values)
            except Exception as exc:
                return TrialOutcome(OutcomeKind.ERROR, self.realize(raws), raws, exc)
            if not holds:
                return TrialOutcome(OutcomeKind.DISCARD, values, raws)

        try:
            result = self.predicate(**values)
        except Exception as exc:
            return TrialOutcome(OutcomeKind.ERROR, self.realize(raws), raws, exc)

        if not isinstance(result, (bool, np.bool_)):
            err = TypeError(f"property {self.name} returned {type(result).__name__}, expected bool")
            return TrialOutcome(OutcomeKind.ERROR, self.realize(raws), raws, err)
        if result:
            return TrialOutcome(OutcomeKind.PASS, values, raws)
        # fresh values: the predicate may have mutated its arguments
        return TrialOutcome(OutcomeKind.FAIL, self.realize(raws), raws)

    def evaluate(self, rng: random.Random, size: int) -> TrialOutcome:
        return self.check(self.draw(size, rng))

    def __repr__(self) -> str:
        binds = ", ".join(f"{n}={g!r}" for n, g in self.bindings)
        return f"Property({self.name}: {binds})"


def for_all(name: str, generator: Generator, body: Union[Property, Predicate]) -> Property:
    """Bind `name` to `generator` in body (an inner Property or a predicate)."""
    if isinstance(body, Property):
        return Property(
            ((name, generator),) + body.bindings, body.predicate, body.precondition, body.name, body.module
        )
    return Property(((name, generator),), body)


def implies(precondition: Predicate, body: Union[Property, Predicate]) -> Property:
    """Discard trials where precondition is false; body is only evaluated otherwise."""
    if not callable(precondition):
        raise GeneratorConfigurationError(f"precondition must be callable, got {type(precondition)}")
    if isinstance(body, Property):
        inner = body.precondition
        if inner is None:
            combined = precondition
        else:
            def combined(**values: Any) -> bool:
                return bool(precondition(**values)) and bool(inner(**values))
        return Property(body.bindings, body.predicate, combined, body.name, body.module)
    return Property((), body, precondition)


def prop(**generators: Generator) -> Callable[[Predicate], Property]:
    """
    Decorator: turn a function into a Property over keyword generators.

        @prop(xs=lists(integers()))
        def prop_reverse_twice(xs):
            return list(reversed(list(reversed(xs)))) == xs
    """
    def decorator(func: Predicate) -> Property:
        return Property(tuple(generators.items()), func, name=func.__name__)

    return decorator
