"""
Tests for comparison primitives and the extrinsic strategy builders.
"""

from __future__ import annotations

import pathlib
import sys
from types import SimpleNamespace

import numpy as np
import pytest

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from rankseq.ordering import (
    Ordering,
    by_field,
    by_key,
    by_sum,
    chain,
    counting,
    natural_order,
    reverse,
    strategy_from_spec,
)

LESS, EQUAL, GREATER = Ordering.LESS, Ordering.EQUAL, Ordering.GREATER


# ------------------------- Ordering.of ------------------------- #

@pytest.mark.parametrize(
    "value, expected",
    [(-5, LESS), (-1, LESS), (0, EQUAL), (1, GREATER), (42, GREATER), (np.int64(-3), LESS), (GREATER, GREATER)],
)
def test_ordering_of_normalises_by_sign(value, expected) -> None:
    assert Ordering.of(value) is expected


@pytest.mark.parametrize("value", [None, True, False, 1.5, "1", np.bool_(True)])
def test_ordering_of_rejects_non_integers(value) -> None:
    with pytest.raises(TypeError):
        Ordering.of(value)


# ------------------------- primitives ------------------------- #

def test_natural_order() -> None:
    assert natural_order(3, 1) is GREATER
    assert natural_order(1, 3) is LESS
    assert natural_order(2, 2) is EQUAL
    assert natural_order("b", "a") is GREATER


def test_reverse_flips_less_and_greater() -> None:
    rev = reverse(natural_order)
    assert rev(3, 1) is LESS
    assert rev(1, 3) is GREATER
    assert rev(2, 2) is EQUAL
    assert reverse(lambda a, b: a - b)(10, 3) is LESS


def test_chain_uses_later_comparators_only_for_ties() -> None:
    compare = chain(by_field("kindness"), by_field("funniness"))
    a = {"kindness": 5, "funniness": 1}
    b = {"kindness": 5, "funniness": 9}
    c = {"kindness": 6, "funniness": 0}
    assert compare(a, b) is LESS
    assert compare(c, b) is GREATER
    assert compare(a, dict(a)) is EQUAL


def test_chain_needs_a_comparator() -> None:
    with pytest.raises(ValueError):
        chain()


def test_counting_tracks_calls() -> None:
    compare = counting(natural_order)
    assert compare.calls == 0
    compare(1, 2)
    compare(2, 1)
    assert compare.calls == 2
    compare.reset()
    assert compare.calls == 0


# ------------------------- strategies ------------------------- #

def test_by_key() -> None:
    by_len = by_key(len)
    assert by_len("abc", "z") is GREATER
    assert by_len("", "z") is LESS


def test_by_field_reads_mappings_and_attributes() -> None:
    compare = by_field("kindness")
    assert compare({"kindness": 7}, {"kindness": 5}) is GREATER
    assert compare(SimpleNamespace(kindness=2), SimpleNamespace(kindness=5)) is LESS


def test_by_field_missing_field_propagates() -> None:
    with pytest.raises(KeyError):
        by_field("kindness")({"talkativity": 1}, {"kindness": 1})
    with pytest.raises(AttributeError):
        by_field("kindness")(SimpleNamespace(), SimpleNamespace(kindness=1))


def test_by_sum() -> None:
    total = by_sum("talkativity", "funniness", "kindness")
    first = {"talkativity": 5, "funniness": 8, "kindness": 5}
    second = {"talkativity": 3, "funniness": 5, "kindness": 7}
    assert total(first, second) is GREATER
    with pytest.raises(ValueError):
        by_sum()


# ------------------------- strategy_from_spec ------------------------- #

def test_spec_natural() -> None:
    assert strategy_from_spec({"kind": "natural"}) is natural_order


def test_spec_field_reverse() -> None:
    compare = strategy_from_spec({"kind": "field", "field": "x", "reverse": True})
    assert compare({"x": 1}, {"x": 2}) is GREATER


def test_spec_sum_with_tie_breaker() -> None:
    compare = strategy_from_spec(
        {"kind": "sum", "fields": ["a", "b"], "then": {"kind": "field", "field": "a"}}
    )
    assert compare({"a": 3, "b": 0}, {"a": 1, "b": 2}) is GREATER
    assert compare({"a": 1, "b": 2}, {"a": 1, "b": 2}) is EQUAL


@pytest.mark.parametrize(
    "spec",
    [
        "natural",
        {},
        {"kind": "bogus"},
        {"kind": "field"},
        {"kind": "field", "field": 3},
        {"kind": "sum"},
        {"kind": "sum", "fields": []},
        {"kind": "sum", "fields": ["a", 1]},
        {"kind": "natural", "then": {"kind": "nope"}},
        {"kind": "natural", "reverse": "false"},
        {"kind": "field", "field": "x", "reverse": 1},
    ],
)
def test_spec_rejects_malformed(spec) -> None:
    with pytest.raises(ValueError):
        strategy_from_spec(spec)
