#!/usr/bin/env python3
#===- tests/test_terms.py - Term Model Tests -----------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

import pytest

from propcheck.terms import Atom, TermKind, format_term, is_term, term_depth, term_kind, term_measure


def test_term_kind_classifies_every_variant() -> None:
    assert term_kind(Atom("ok")) is TermKind.ATOM
    assert term_kind(True) is TermKind.ATOM
    assert term_kind(3) is TermKind.INTEGER
    assert term_kind(2.5) is TermKind.FLOAT
    assert term_kind(b"\x01") is TermKind.BINARY
    assert term_kind((1, 2)) is TermKind.TUPLE
    assert term_kind([1]) is TermKind.LIST
    with pytest.raises(TypeError):
        term_kind({"a": 1})


def test_is_term_rejects_non_finite_and_foreign_values() -> None:
    assert is_term([Atom("a"), (1, 2.0, b""), []])
    assert not is_term([1, float("nan")])
    assert not is_term((1, {"x"}))


def test_atom_identity_is_by_name() -> None:
    assert Atom("foo") == Atom("foo")
    assert Atom("foo") != Atom("bar")
    assert hash(Atom("foo")) == hash(Atom("foo"))
    with pytest.raises(TypeError):
        Atom(3)


def test_format_term_erlang_notation() -> None:
    assert format_term([Atom("ok"), (1, b"\x01\x02"), True]) == "[ok,{1,<<1,2>>},true]"
    assert format_term(Atom("Hello world")) == "'Hello world'"
    assert format_term(Atom("")) == "''"
    assert str(Atom("abc")) == "abc"


def test_measure_decreases_for_subterms() -> None:
    outer = ([1, 2], Atom("b"))
    assert term_measure([1, 2]) < term_measure(outer)
    assert term_measure(Atom("b")) < term_measure(outer)
    assert term_measure(0) < term_measure(5)
    assert term_measure(Atom("a")) < term_measure(Atom("b"))


def test_term_depth() -> None:
    assert term_depth(1) == 0
    assert term_depth([]) == 1
    assert term_depth([(1,), [[]]]) == 3
