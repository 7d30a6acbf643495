#!/usr/bin/env python3
#===- propcheck/terms.py - Term Value Domain -----------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   The open, recursively-defined value domain produced by generators.
#
#   Variants map onto Python types:
#     ATOM    -> Atom (frozen dataclass, interned by name equality)
#     INTEGER -> int
#     FLOAT   -> float (finite only)
#     BINARY  -> bytes
#     TUPLE   -> tuple (fixed arity)
#     LIST    -> list (ordered, unbounded nesting)
#
#   bool is accepted as a term and rendered as the atoms true/false.
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union


class TermKind(str, Enum):
    ATOM = "atom"
    INTEGER = "integer"
    FLOAT = "float"
    BINARY = "binary"
    TUPLE = "tuple"
    LIST = "list"


@dataclass(frozen=True, order=True)
class Atom:
    """A named symbol. Two atoms are equal iff their names are equal."""
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Atom name must be str, got {type(self.name)}")

    def __repr__(self) -> str:
        return f"Atom({self.name!r})"

    def __str__(self) -> str:
        return format_term(self)


Term = Union[Atom, bool, int, float, bytes, tuple, list]


def term_kind(value: Any) -> TermKind:
    """Classify a term, raising TypeError for values outside the domain."""
    # bool before int: bool is an int subclass
    if isinstance(value, (Atom, bool)):
        return TermKind.ATOM
    if isinstance(value, int):
        return TermKind.INTEGER
    if isinstance(value, float):
        return TermKind.FLOAT
    if isinstance(value, (bytes, bytearray)):
        return TermKind.BINARY
    if isinstance(value, tuple):
        return TermKind.TUPLE
    if isinstance(value, list):
        return TermKind.LIST
    raise TypeError(f"Not a term: {type(value)}")


def is_term(value: Any) -> bool:
    """Recursive well-formedness check (finite floats, nested members are terms)."""
    stack = [value]
    while stack:
        v = stack.pop()
        try:
            kind = term_kind(v)
        except TypeError:
            return False
        if kind is TermKind.FLOAT and not math.isfinite(v):
            return False
        if kind in (TermKind.TUPLE, TermKind.LIST):
            stack.extend(v)
    return True


def _leaf_weight(value: Any, kind: TermKind) -> float:
    if kind is TermKind.ATOM:
        if isinstance(value, bool):
            return 1 if value else 0
        return len(value.name) + sum(ord(c) - ord("a") for c in value.name if c >= "a")
    if kind is TermKind.INTEGER:
        return abs(value)
    if kind is TermKind.FLOAT:
        return abs(value)
    if kind is TermKind.BINARY:
        return len(value) + sum(value)
    return 0


def term_measure(value: Any) -> Tuple[int, float]:
    """
    Well-founded size measure of a term: (node count, leaf weight).

    Compared lexicographically. Replacing a sub-term by a strictly smaller
    one strictly decreases the measure of the enclosing term.
    """
    nodes = 0
    weight: float = 0
    stack = [value]
    while stack:
        v = stack.pop()
        kind = term_kind(v)
        nodes += 1
        if kind in (TermKind.TUPLE, TermKind.LIST):
            stack.extend(v)
        else:
            weight += _leaf_weight(v, kind)
    return nodes, weight


def term_depth(value: Any) -> int:
    kind = term_kind(value)
    if kind in (TermKind.TUPLE, TermKind.LIST):
        return 1 + max((term_depth(v) for v in value), default=0)
    return 0


def format_term(value: Any) -> str:
    """Render a term in Erlang-like notation."""
    kind = term_kind(value)
    if kind is TermKind.ATOM:
        if isinstance(value, bool):
            return "true" if value else "false"
        name = value.name
        if name and name[0].islower() and all(c.isalnum() or c == "_" for c in name):
            return name
        return "'" + name.replace("\\", "\\\\").replace("'", "\\'") + "'"
    if kind is TermKind.BINARY:
        return "<<" + ",".join(str(b) for b in bytes(value)) + ">>"
    if kind is TermKind.TUPLE:
        return "{" + ",".join(format_term(v) for v in value) + "}"
    if kind is TermKind.LIST:
        return "[" + ",".join(format_term(v) for v in value) + "]"
    return repr(value)
