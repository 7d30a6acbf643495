# propcheck/tests/conftest.py
from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

# Ensure repository root is on sys.path when running pytest from repo root.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SAMPLE_PROPS = textwrap.dedent(
    '''
    from propcheck import for_all, integers, lists, prop


    def _dedup_sort(xs):
        return sorted(set(xs))


    @prop(xs=lists(integers()))
    def prop_sort_is_ordered(xs):
        ys = sorted(xs)
        return all(a <= b for a, b in zip(ys, ys[1:]))


    def prop_dedup_sort_keeps_length():
        return for_all("xs", lists(integers()), lambda xs: len(_dedup_sort(xs)) == len(xs))


    def helper_not_a_property():
        return for_all("x", integers(), lambda x: False)
    '''
)


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Importable module with one passing and one failing property."""
    name = "propcheck_sample_props"
    (tmp_path / f"{name}.py").write_text(SAMPLE_PROPS, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)
    return name
