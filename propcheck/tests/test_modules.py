#!/usr/bin/env python3
#===- tests/test_modules.py - Module Run Tests ---------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#

from __future__ import annotations

import textwrap
import types

from propcheck.config import RunConfig
from propcheck.modules import check_module, discover_properties, run_module
from propcheck.outcomes import PropertyRef, RunStatus
from propcheck.reporting import CollectingReporter


def _module_from_source(name: str, source: str) -> types.ModuleType:
    mod = types.ModuleType(name)
    exec(textwrap.dedent(source), mod.__dict__)
    return mod


def test_run_module_returns_only_failing_refs(sample_module: str) -> None:
    failing = run_module(sample_module, config=RunConfig(seed=1))
    assert failing == [PropertyRef(sample_module, "prop_dedup_sort_keeps_length")]


def test_discovery_is_in_definition_order(sample_module: str) -> None:
    refs = [ref for ref, _ in discover_properties(sample_module)]
    assert [r.name for r in refs] == ["prop_sort_is_ordered", "prop_dedup_sort_keeps_length"]


def test_check_module_records_every_property(sample_module: str) -> None:
    result = check_module(sample_module, config=RunConfig(seed=1))
    statuses = {ref.name: res.status for ref, res in result.entries}
    assert statuses == {
        "prop_sort_is_ordered": RunStatus.PASSED,
        "prop_dedup_sort_keeps_length": RunStatus.FALSIFIED,
    }
    assert not result.ok
    payload = result.to_dict()
    assert payload["failures"] == [f"{sample_module}:prop_dedup_sort_keeps_length"]


def test_gave_up_and_bad_declarations_are_per_property_failures() -> None:
    mod = _module_from_source(
        "props_with_problems",
        """
        from propcheck import for_all, implies, integers

        prop_never = implies(lambda x: False, for_all("x", integers(), lambda x: True))

        def prop_not_a_property():
            return 42

        def prop_fine():
            return for_all("x", integers(), lambda x: isinstance(x, int))
        """,
    )
    rep = CollectingReporter()
    result = check_module(mod, config=RunConfig(num_trials=5, seed=0), reporter=rep)
    statuses = {ref.name: res.status for ref, res in result.entries}
    assert statuses == {
        "prop_never": RunStatus.GAVE_UP,
        "prop_not_a_property": RunStatus.CONFIG_ERROR,
        "prop_fine": RunStatus.PASSED,
    }
    assert [r.name for r in result.failures()] == ["prop_never", "prop_not_a_property"]
    assert ("abort", RunStatus.CONFIG_ERROR) in rep.signals


def test_prefix_and_foreign_callables_are_ignored() -> None:
    mod = _module_from_source(
        "props_prefix",
        """
        from propcheck import for_all, integers
        from os.path import join as prop_imported

        check_one = for_all("x", integers(), lambda x: True)
        prop_two = for_all("x", integers(), lambda x: True)

        def prop_needs_args(a):
            return a
        """,
    )
    assert [r.name for r, _ in discover_properties(mod)] == ["prop_two"]
    assert [r.name for r, _ in discover_properties(mod, prefix="check_")] == ["check_one"]


def test_module_run_names_results_after_attributes() -> None:
    mod = _module_from_source(
        "props_named",
        """
        from propcheck import for_all, integers

        prop_anon = for_all("x", integers(), lambda x: x < 2)
        """,
    )
    result = check_module(mod, config=RunConfig(seed=3))
    (ref, res), = result.entries
    assert res.property_name == "prop_anon"
    assert res.shrunk == {"x": 2}


def test_raising_factory_and_transform_do_not_stop_the_module() -> None:
    mod = _module_from_source(
        "props_that_raise",
        """
        from propcheck import for_all, integers, let_

        def prop_broken():
            raise RuntimeError("cannot build")

        prop_bad_transform = for_all("x", let_(integers(), lambda n: {}["missing"]), lambda x: True)

        prop_fail = for_all("x", integers(), lambda x: x < 3)
        """,
    )
    rep = CollectingReporter()
    result = check_module(mod, config=RunConfig(seed=2), reporter=rep)
    statuses = {ref.name: res.status for ref, res in result.entries}
    assert statuses == {
        "prop_broken": RunStatus.ABORTED,
        "prop_bad_transform": RunStatus.ABORTED,
        "prop_fail": RunStatus.FALSIFIED,
    }
    assert [r.name for r in result.failures()] == ["prop_broken", "prop_bad_transform", "prop_fail"]
    assert ("abort", RunStatus.ABORTED) in rep.signals
    errors = {ref.name: res.error for ref, res in result.entries}
    assert isinstance(errors["prop_broken"], RuntimeError)
    assert isinstance(errors["prop_bad_transform"], KeyError)
    shrunk = {ref.name: res.shrunk for ref, res in result.entries}
    assert shrunk["prop_fail"] == {"x": 3}


def test_imported_property_objects_are_not_rediscovered() -> None:
    origin = _module_from_source(
        "props_origin",
        """
        from propcheck import for_all, integers

        prop_shared = for_all("x", integers(), lambda x: x < 3)
        """,
    )
    importer = types.ModuleType("props_importer")
    importer.__dict__["prop_shared"] = origin.prop_shared
    exec(
        textwrap.dedent(
            """
            from propcheck import for_all, integers

            prop_local = for_all("x", integers(), lambda x: True)
            """
        ),
        importer.__dict__,
    )
    assert origin.prop_shared.module == "props_origin"
    assert [r.name for r, _ in discover_properties(origin)] == ["prop_shared"]
    assert [r.name for r, _ in discover_properties(importer)] == ["prop_local"]
    assert run_module(importer, config=RunConfig(seed=1)) == []
