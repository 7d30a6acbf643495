#!/usr/bin/env python3
#===- propcheck/generators.py - Generators ------------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Generators describe how to produce terms of a given shape.
#
#   Every generator works on a *raw* sample:
#     - draw(size, rng)  -> raw
#     - realize(raw)     -> produced value
#     - shrink(raw)      -> lazy iterator of strictly smaller raws
#     - measure(raw)     -> well-founded size measure
#
#   For primitive generators raw == value. Composite generators keep the
#   raws of their parts, and let_ keeps the raw of its base generator, so
#   derived generators shrink through the pre-image and reapply the
#   transform rather than inventing candidates for the transformed value.
#
# This module:
#   - DOES: validate declarations, sample raws, shrink raws
#   - DOES NOT: filter by rejection (that is a property precondition)
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import copy
import math
import random
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .errors import GeneratorConfigurationError
from .shrink import (
    ATOM_ALPHABET,
    shrink_atom_name,
    shrink_binary,
    shrink_float,
    shrink_integer,
    shrink_sequence,
    shrink_term,
)
from .terms import Atom, term_measure

T = TypeVar("T")

# Erlang caps atom names at 255 characters
MAX_ATOM_LENGTH = 255


class Generator(ABC, Generic[T]):
    """
    Generator interface.

    Generators are immutable descriptions: they hold no RNG and no size, and
    can be shared between properties and reused across runs.
    """

    @abstractmethod
    def draw(self, size: int, rng: random.Random) -> Any:
        """Sample a raw value at the given size."""
        raise NotImplementedError

    def realize(self, raw: Any) -> T:
        return raw

    def generate(self, size: int, rng: random.Random) -> T:
        return self.realize(self.draw(size, rng))

    def shrink(self, raw: Any) -> Iterator[Any]:
        return iter(())

    def measure(self, raw: Any) -> Any:
        return 0

    def map(self, transform: Callable[[T], Any]) -> "LetGenerator":
        return let_(self, transform)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _ensure_generator(value: Any, *, name: str) -> Generator:
    if not isinstance(value, Generator):
        raise GeneratorConfigurationError(f"{name} must be a Generator, got {type(value)}")
    return value


def _check_bound(value: Any, *, name: str, kind: type) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, kind):
        raise GeneratorConfigurationError(f"{name} must be {kind.__name__} or None, got {value!r}")


def _clamp_target(target, lo, hi):
    if lo is not None and target < lo:
        return lo
    if hi is not None and target > hi:
        return hi
    return target


def _size_range(size: int, lo, hi) -> Tuple[Any, Any]:
    size = max(0, int(size))
    if lo is not None and hi is not None:
        return lo, hi
    if lo is not None:
        return lo, lo + size
    if hi is not None:
        return hi - size, hi
    return -size, size


# -----------------------------
# Primitive generators
# -----------------------------

class IntegerGenerator(Generator[int]):
    def __init__(self, min_value: Optional[int] = None, max_value: Optional[int] = None):
        _check_bound(min_value, name="min_value", kind=int)
        _check_bound(max_value, name="max_value", kind=int)
        if min_value is not None and max_value is not None and min_value > max_value:
            raise GeneratorConfigurationError(
                f"integers: min_value={min_value} > max_value={max_value}"
            )
        self.min_value = min_value
        self.max_value = max_value
        self.target = _clamp_target(0, min_value, max_value)

    def draw(self, size: int, rng: random.Random) -> int:
        lo, hi = _size_range(size, self.min_value, self.max_value)
        return rng.randint(lo, hi)

    def shrink(self, raw: int) -> Iterator[int]:
        return shrink_integer(raw, self.target)

    def measure(self, raw: int) -> int:
        return abs(raw - self.target)

    def __repr__(self) -> str:
        return f"integers(min_value={self.min_value}, max_value={self.max_value})"


class FloatGenerator(Generator[float]):
    def __init__(self, min_value: Optional[float] = None, max_value: Optional[float] = None):
        for name, v in (("min_value", min_value), ("max_value", max_value)):
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise GeneratorConfigurationError(f"floats: {name} must be a finite number, got {v!r}")
        if min_value is not None and max_value is not None and min_value > max_value:
            raise GeneratorConfigurationError(
                f"floats: min_value={min_value} > max_value={max_value}"
            )
        self.min_value = None if min_value is None else float(min_value)
        self.max_value = None if max_value is None else float(max_value)
        self.target = _clamp_target(0.0, self.min_value, self.max_value)

    def draw(self, size: int, rng: random.Random) -> float:
        lo, hi = _size_range(size, self.min_value, self.max_value)
        x = rng.uniform(float(lo), float(hi))
        # uniform() may round one ulp past hi
        return min(max(x, float(lo)), float(hi))

    def shrink(self, raw: float) -> Iterator[float]:
        return shrink_float(raw, self.target, self.min_value, self.max_value)

    def measure(self, raw: float) -> float:
        return abs(raw - self.target)

    def __repr__(self) -> str:
        return f"floats(min_value={self.min_value}, max_value={self.max_value})"


class BooleanGenerator(Generator[bool]):
    def draw(self, size: int, rng: random.Random) -> bool:
        return rng.random() < 0.5

    def shrink(self, raw: bool) -> Iterator[bool]:
        if raw:
            yield False

    def measure(self, raw: bool) -> int:
        return 1 if raw else 0


class AtomGenerator(Generator[Atom]):
    """Atoms with lowercase names; raw is the name string."""

    def __init__(self, max_length: int = MAX_ATOM_LENGTH, alphabet: str = ATOM_ALPHABET):
        if not isinstance(max_length, int) or not (0 <= max_length <= MAX_ATOM_LENGTH):
            raise GeneratorConfigurationError(
                f"atoms: max_length must be in [0, {MAX_ATOM_LENGTH}], got {max_length!r}"
            )
        if not alphabet:
            raise GeneratorConfigurationError("atoms: alphabet must be non-empty")
        self.max_length = max_length
        self.alphabet = alphabet

    def draw(self, size: int, rng: random.Random) -> str:
        n = rng.randint(0, min(max(0, size), self.max_length))
        return "".join(rng.choice(self.alphabet) for _ in range(n))

    def realize(self, raw: str) -> Atom:
        return Atom(raw)

    def shrink(self, raw: str) -> Iterator[str]:
        return shrink_atom_name(raw, self.alphabet)

    def measure(self, raw: str) -> Tuple[int, int]:
        return len(raw), sum(max(self.alphabet.find(c), 0) for c in raw)


class BinaryGenerator(Generator[bytes]):
    def __init__(self, max_length: Optional[int] = None):
        if max_length is not None and (not isinstance(max_length, int) or max_length < 0):
            raise GeneratorConfigurationError(f"binaries: max_length must be >= 0, got {max_length!r}")
        self.max_length = max_length

    def draw(self, size: int, rng: random.Random) -> bytes:
        hi = max(0, size)
        if self.max_length is not None:
            hi = min(hi, self.max_length)
        n = rng.randint(0, hi)
        return bytes(rng.randrange(256) for _ in range(n))

    def shrink(self, raw: bytes) -> Iterator[bytes]:
        return shrink_binary(raw)

    def measure(self, raw: bytes) -> Tuple[int, int]:
        return len(raw), sum(raw)


class JustGenerator(Generator[T]):
    def __init__(self, value: T):
        self.value = value

    def draw(self, size: int, rng: random.Random) -> None:
        return None

    def realize(self, raw: Any) -> T:
        return copy.deepcopy(self.value)

    def __repr__(self) -> str:
        return f"just({self.value!r})"


class ElementsGenerator(Generator[T]):
    """Pick one of a fixed sequence; raw is the index, shrinking toward the front."""

    def __init__(self, items: Sequence[T]):
        items = tuple(items)
        if not items:
            raise GeneratorConfigurationError("elements: items must be non-empty")
        self.items = items

    def draw(self, size: int, rng: random.Random) -> int:
        return rng.randrange(len(self.items))

    def realize(self, raw: int) -> T:
        return self.items[raw]

    def shrink(self, raw: int) -> Iterator[int]:
        return shrink_integer(raw)

    def measure(self, raw: int) -> int:
        return raw


class OneOfGenerator(Generator[Any]):
    """
    Weighted choice between generators; raw is (index, inner raw).

    Shrinking stays within the chosen alternative.
    """

    def __init__(self, generators: Sequence[Generator], weights: Optional[Sequence[float]] = None):
        gens = tuple(_ensure_generator(g, name="one_of alternative") for g in generators)
        if not gens:
            raise GeneratorConfigurationError("one_of: at least one generator required")
        if weights is not None:
            weights = tuple(float(w) for w in weights)
            if len(weights) != len(gens):
                raise GeneratorConfigurationError("frequency: one weight per generator required")
            if any(w < 0 or not math.isfinite(w) for w in weights) or sum(weights) <= 0:
                raise GeneratorConfigurationError(f"frequency: invalid weights {weights}")
        self.generators = gens
        self.weights = weights

    def draw(self, size: int, rng: random.Random) -> Tuple[int, Any]:
        if self.weights is None:
            idx = rng.randrange(len(self.generators))
        else:
            idx = rng.choices(range(len(self.generators)), weights=self.weights)[0]
        return idx, self.generators[idx].draw(size, rng)

    def realize(self, raw: Tuple[int, Any]) -> Any:
        idx, inner = raw
        return self.generators[idx].realize(inner)

    def shrink(self, raw: Tuple[int, Any]) -> Iterator[Tuple[int, Any]]:
        idx, inner = raw
        for cand in self.generators[idx].shrink(inner):
            yield idx, cand

    def measure(self, raw: Tuple[int, Any]) -> Any:
        idx, inner = raw
        return self.generators[idx].measure(inner)


# -----------------------------
# Containers
# -----------------------------

class ListGenerator(Generator[List[Any]]):
    """Lists with length drawn uniformly from [min_length, clamp(size)]."""

    def __init__(self, element: Generator, min_length: int = 0, max_length: Optional[int] = None):
        self.element = _ensure_generator(element, name="lists element")
        if not isinstance(min_length, int) or min_length < 0:
            raise GeneratorConfigurationError(f"lists: min_length must be >= 0, got {min_length!r}")
        if max_length is not None:
            if not isinstance(max_length, int) or max_length < 0:
                raise GeneratorConfigurationError(f"lists: max_length must be >= 0, got {max_length!r}")
            if max_length < min_length:
                raise GeneratorConfigurationError(
                    f"lists: max_length={max_length} < min_length={min_length}"
                )
        self.min_length = min_length
        self.max_length = max_length

    def draw(self, size: int, rng: random.Random) -> List[Any]:
        hi = max(self.min_length, size)
        if self.max_length is not None:
            hi = min(hi, self.max_length)
        n = rng.randint(self.min_length, hi)
        return [self.element.draw(size, rng) for _ in range(n)]

    def realize(self, raw: List[Any]) -> List[Any]:
        return [self.element.realize(r) for r in raw]

    def shrink(self, raw: List[Any]) -> Iterator[List[Any]]:
        return shrink_sequence(raw, self.element.shrink, self.min_length)

    def measure(self, raw: List[Any]) -> Tuple[int, Tuple[Any, ...]]:
        return len(raw), tuple(self.element.measure(r) for r in raw)

    def __repr__(self) -> str:
        return f"lists({self.element!r}, min_length={self.min_length}, max_length={self.max_length})"


class TupleGenerator(Generator[tuple]):
    def __init__(self, generators: Sequence[Generator]):
        self.generators = tuple(_ensure_generator(g, name="tuples component") for g in generators)

    def draw(self, size: int, rng: random.Random) -> Tuple[Any, ...]:
        return tuple(g.draw(size, rng) for g in self.generators)

    def realize(self, raw: Tuple[Any, ...]) -> tuple:
        return tuple(g.realize(r) for g, r in zip(self.generators, raw))

    def shrink(self, raw: Tuple[Any, ...]) -> Iterator[Tuple[Any, ...]]:
        for i, g in enumerate(self.generators):
            for cand in g.shrink(raw[i]):
                yield raw[:i] + (cand,) + raw[i + 1:]

    def measure(self, raw: Tuple[Any, ...]) -> Tuple[Any, ...]:
        return tuple(g.measure(r) for g, r in zip(self.generators, raw))


def _thaw(value: Any) -> Any:
    # fresh lists so predicates cannot mutate the raw kept for shrinking
    if isinstance(value, list):
        return [_thaw(v) for v in value]
    if isinstance(value, tuple):
        return tuple(_thaw(v) for v in value)
    return value


class TermGenerator(Generator[Any]):
    """
    Arbitrary terms: atoms, integers, floats, binaries, tuples and lists.

    Containers split (size - 1) between their children, so nesting depth is
    bounded by size and every generated term is finite.
    """

    def __init__(self, max_children: int = 8, leaf_bias: float = 0.5):
        if not isinstance(max_children, int) or max_children < 0:
            raise GeneratorConfigurationError(f"terms: max_children must be >= 0, got {max_children!r}")
        if not (0.0 <= float(leaf_bias) <= 1.0):
            raise GeneratorConfigurationError(f"terms: leaf_bias must be in [0,1], got {leaf_bias!r}")
        self.max_children = max_children
        self.leaf_bias = float(leaf_bias)
        self._leaves: Tuple[Generator, ...] = (
            AtomGenerator(max_length=16),
            IntegerGenerator(),
            FloatGenerator(),
            BinaryGenerator(max_length=16),
        )

    def _draw_term(self, size: int, rng: random.Random) -> Any:
        if size <= 1 or self.max_children == 0 or rng.random() < self.leaf_bias:
            leaf = self._leaves[rng.randrange(len(self._leaves))]
            return leaf.generate(size, rng)
        as_tuple = rng.random() < 0.5
        n = rng.randint(0, min(size, self.max_children))
        child_size = (size - 1) // max(n, 1)
        children = [self._draw_term(child_size, rng) for _ in range(n)]
        return tuple(children) if as_tuple else children

    def draw(self, size: int, rng: random.Random) -> Any:
        return self._draw_term(max(0, size), rng)

    def realize(self, raw: Any) -> Any:
        return _thaw(raw)

    def shrink(self, raw: Any) -> Iterator[Any]:
        return shrink_term(raw)

    def measure(self, raw: Any) -> Tuple[int, float]:
        return term_measure(raw)


# -----------------------------
# Derived generators
# -----------------------------

class LetGenerator(Generator[T]):
    """
    Derived generator: samples are transform(base sample).

    The raw is the base generator's raw, so shrinking shrinks the pre-image
    and reapplies the transform.
    """

    def __init__(self, base: Generator, transform: Callable[[Any], T]):
        self.base = _ensure_generator(base, name="let_ base")
        if not callable(transform):
            raise GeneratorConfigurationError(f"let_ transform must be callable, got {type(transform)}")
        self.transform = transform

    def draw(self, size: int, rng: random.Random) -> Any:
        return self.base.draw(size, rng)

    def realize(self, raw: Any) -> T:
        return self.transform(self.base.realize(raw))

    def shrink(self, raw: Any) -> Iterator[Any]:
        return self.base.shrink(raw)

    def measure(self, raw: Any) -> Any:
        return self.base.measure(raw)

    def __repr__(self) -> str:
        return f"let_({self.base!r}, {getattr(self.transform, '__name__', self.transform)!r})"


class SizedGenerator(Generator[Any]):
    """Generator chosen from the current size; raw is (size, inner raw)."""

    def __init__(self, factory: Callable[[int], Generator]):
        if not callable(factory):
            raise GeneratorConfigurationError(f"sized factory must be callable, got {type(factory)}")
        self.factory = factory

    def _at(self, size: int) -> Generator:
        return _ensure_generator(self.factory(size), name="sized factory result")

    def draw(self, size: int, rng: random.Random) -> Tuple[int, Any]:
        return size, self._at(size).draw(size, rng)

    def realize(self, raw: Tuple[int, Any]) -> Any:
        size, inner = raw
        return self._at(size).realize(inner)

    def shrink(self, raw: Tuple[int, Any]) -> Iterator[Tuple[int, Any]]:
        size, inner = raw
        for cand in self._at(size).shrink(inner):
            yield size, cand

    def measure(self, raw: Tuple[int, Any]) -> Any:
        size, inner = raw
        return self._at(size).measure(inner)


class ResizeGenerator(Generator[T]):
    def __init__(self, size: int, generator: Generator[T]):
        if not isinstance(size, int) or size < 0:
            raise GeneratorConfigurationError(f"resize: size must be >= 0, got {size!r}")
        self.size = size
        self.generator = _ensure_generator(generator, name="resize generator")

    def draw(self, size: int, rng: random.Random) -> Any:
        return self.generator.draw(self.size, rng)

    def realize(self, raw: Any) -> T:
        return self.generator.realize(raw)

    def shrink(self, raw: Any) -> Iterator[Any]:
        return self.generator.shrink(raw)

    def measure(self, raw: Any) -> Any:
        return self.generator.measure(raw)


# -----------------------------
# Constructors
# -----------------------------

def integers(min_value: Optional[int] = None, max_value: Optional[int] = None) -> IntegerGenerator:
    return IntegerGenerator(min_value, max_value)


def floats(min_value: Optional[float] = None, max_value: Optional[float] = None) -> FloatGenerator:
    return FloatGenerator(min_value, max_value)


def booleans() -> BooleanGenerator:
    return BooleanGenerator()


def atoms(max_length: int = MAX_ATOM_LENGTH) -> AtomGenerator:
    return AtomGenerator(max_length=max_length)


def binaries(max_length: Optional[int] = None) -> BinaryGenerator:
    return BinaryGenerator(max_length=max_length)


def just(value: T) -> JustGenerator[T]:
    return JustGenerator(value)


def elements(items: Sequence[T]) -> ElementsGenerator[T]:
    return ElementsGenerator(items)


def one_of(*generators: Generator) -> OneOfGenerator:
    return OneOfGenerator(generators)


def frequency(*weighted: Tuple[float, Generator]) -> OneOfGenerator:
    for pair in weighted:
        if not isinstance(pair, tuple) or len(pair) != 2:
            raise GeneratorConfigurationError(f"frequency expects (weight, generator) pairs, got {pair!r}")
    return OneOfGenerator([g for _, g in weighted], weights=[w for w, _ in weighted])


def lists(element: Generator, min_length: int = 0, max_length: Optional[int] = None) -> ListGenerator:
    return ListGenerator(element, min_length, max_length)


def non_empty(generator: ListGenerator) -> ListGenerator:
    if not isinstance(generator, ListGenerator):
        raise GeneratorConfigurationError(f"non_empty expects a list generator, got {type(generator)}")
    return ListGenerator(generator.element, max(1, generator.min_length), generator.max_length)


def vectors(length: int, element: Generator) -> ListGenerator:
    return ListGenerator(element, length, length)


def tuples(*generators: Generator) -> TupleGenerator:
    return TupleGenerator(generators)


def terms(max_children: int = 8, leaf_bias: float = 0.5) -> TermGenerator:
    return TermGenerator(max_children=max_children, leaf_bias=leaf_bias)


def let_(base: Generator, transform: Callable[[Any], T]) -> LetGenerator[T]:
    return LetGenerator(base, transform)


def text(alphabet: str = ATOM_ALPHABET, min_length: int = 0, max_length: Optional[int] = None) -> LetGenerator[str]:
    if not alphabet:
        raise GeneratorConfigurationError("text: alphabet must be non-empty")
    return let_(lists(elements(alphabet), min_length, max_length), "".join)


def sized(factory: Callable[[int], Generator]) -> SizedGenerator:
    return SizedGenerator(factory)


def resize(size: int, generator: Generator[T]) -> ResizeGenerator[T]:
    return ResizeGenerator(size, generator)
