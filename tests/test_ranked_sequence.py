"""
Behavioural tests for RankedSequence: construction, insert, get_at and the
container protocol, plus the concrete ranking scenarios for intrinsic and
extrinsic orderings.
"""

from __future__ import annotations

import functools
import pathlib
import sys
from dataclasses import dataclass

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from rankseq import (
    InsertMode,
    Ordering,
    RankOutOfRangeError,
    RankedSequence,
    TiePolicy,
    by_field,
    by_sum,
    natural_order,
)


@dataclass(frozen=True)
class Person:
    talkativity: int
    funniness: int
    kindness: int


@functools.total_ordering
@dataclass(frozen=True)
class Score:
    """Carries its own (intrinsic) ordering via __lt__."""

    value: int

    def __lt__(self, other: "Score") -> bool:
        return self.value < other.value


ALICE = Person(talkativity=5, funniness=8, kindness=5)
BOB = Person(talkativity=3, funniness=5, kindness=7)
CAROL = Person(talkativity=10, funniness=2, kindness=2)


def _build(compare, *items, **kwargs) -> RankedSequence:
    seq = RankedSequence(compare, **kwargs)
    for item in items:
        seq.insert(item)
    return seq


# ------------------------- scenarios ------------------------- #

@pytest.mark.parametrize("mode", list(InsertMode))
def test_prefer_higher_talkativity(mode: InsertMode) -> None:
    seq = _build(by_field("talkativity"), ALICE, BOB, CAROL, insertion=mode)
    assert seq.get_at(0) is CAROL
    assert [p.talkativity for p in seq] == [10, 5, 3]


@pytest.mark.parametrize("mode", list(InsertMode))
def test_same_items_under_kindness_rank_differently(mode: InsertMode) -> None:
    seq = _build(by_field("kindness"), ALICE, BOB, CAROL, insertion=mode)
    assert seq.get_at(0) is BOB
    assert [p.kindness for p in seq] == [7, 5, 2]


@pytest.mark.parametrize("mode", list(InsertMode))
def test_total_of_three_fields(mode: InsertMode) -> None:
    seq = _build(by_sum("talkativity", "funniness", "kindness"), ALICE, BOB, CAROL, insertion=mode)
    assert seq.get_at(0) is ALICE
    assert list(seq) == [ALICE, BOB, CAROL]


def test_mapping_items_work_with_field_strategies() -> None:
    rows = [{"kindness": 5}, {"kindness": 7}, {"kindness": 2}]
    seq = _build(by_field("kindness"), *rows)
    assert seq.get_at(0) == {"kindness": 7}


def test_intrinsic_ordering_is_the_default() -> None:
    seq = RankedSequence()
    seq.extend([Score(3), Score(9), Score(1)])
    assert seq.compare is natural_order
    assert [s.value for s in seq] == [9, 3, 1]


def test_plain_ints_under_natural_order() -> None:
    seq = _build(natural_order, 5, 3, 10)
    assert seq.get_at(0) == 10
    assert seq.top(3) == [10, 5, 3]


def test_signed_integer_comparators_are_accepted() -> None:
    seq = _build(lambda a, b: (a > b) - (a < b), 2, 40, -7)
    assert list(seq) == [40, 2, -7]
    seq2 = _build(lambda a, b: 1000 * (a - b), 2, 40, -7)
    assert list(seq2) == [40, 2, -7]


def test_comparator_returning_bool_is_rejected() -> None:
    seq = RankedSequence(lambda a, b: a > b)
    seq.insert(1)
    with pytest.raises(TypeError):
        seq.insert(2)


# ------------------------- insert ------------------------- #

def test_insert_returns_landing_rank() -> None:
    seq = RankedSequence()
    assert seq.insert(5) == 0
    assert seq.insert(3) == 1
    assert seq.insert(10) == 0
    assert seq.insert(4) == 2


def test_insert_appends_when_every_resident_outranks() -> None:
    seq = _build(natural_order, 9, 8, 7)
    assert seq.insert(1) == 3
    assert seq.get_at(3) == 1


def test_insert_keeps_relative_order_of_residents() -> None:
    seq = _build(natural_order, 50, 30, 10)
    seq.insert(20)
    assert [x for x in seq if x != 20] == [50, 30, 10]


@pytest.mark.parametrize("ties", list(TiePolicy))
def test_linear_and_bisect_land_at_same_rank(ties: TiePolicy) -> None:
    linear = RankedSequence(ties=ties, insertion="linear")
    bisected = RankedSequence(ties=ties, insertion="bisect")
    for x in [4, 4, 1, 9, 4, 0, 9, 2, 4]:
        assert linear.insert(x) == bisected.insert(x)


# ------------------------- get_at / out of range ------------------------- #

def test_get_at_on_empty_sequence_fails() -> None:
    with pytest.raises(RankOutOfRangeError):
        RankedSequence().get_at(0)


def test_get_at_length_fails_and_last_rank_succeeds() -> None:
    seq = _build(natural_order, 1, 2, 3)
    assert seq.get_at(len(seq) - 1) == 1
    with pytest.raises(RankOutOfRangeError) as excinfo:
        seq.get_at(len(seq))
    assert excinfo.value.rank == 3
    assert excinfo.value.length == 3


def test_negative_rank_is_out_of_range() -> None:
    seq = _build(natural_order, 1, 2, 3)
    with pytest.raises(RankOutOfRangeError):
        seq.get_at(-1)
    with pytest.raises(IndexError):
        seq[-1]


def test_non_integer_rank_is_a_type_error() -> None:
    seq = _build(natural_order, 1)
    with pytest.raises(TypeError):
        seq.get_at("0")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        seq.get_at(True)


def test_numpy_integer_ranks_are_accepted() -> None:
    seq = _build(natural_order, 5, 3, 10)
    assert [seq.get_at(r) for r in np.arange(len(seq))] == [10, 5, 3]
    assert seq[np.int32(1)] == 5
    with pytest.raises(RankOutOfRangeError):
        seq.get_at(np.int64(3))
    with pytest.raises(TypeError):
        seq.get_at(np.bool_(False))


def test_get_at_has_no_side_effects() -> None:
    seq = _build(natural_order, 4, 8, 6)
    before = list(seq)
    for rank in range(len(seq)):
        seq.get_at(rank)
    assert len(seq) == 3
    assert list(seq) == before


def test_getitem_matches_get_at() -> None:
    seq = _build(natural_order, 4, 8, 6)
    assert [seq[i] for i in range(len(seq))] == [seq.get_at(i) for i in range(len(seq))]


# ------------------------- construction & protocol ------------------------- #

def test_construction_validates_arguments() -> None:
    with pytest.raises(TypeError):
        RankedSequence("not callable")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        RankedSequence(ties="random")
    with pytest.raises(ValueError):
        RankedSequence(insertion="heap")


def test_configuration_is_read_only() -> None:
    seq = RankedSequence(ties="oldest_first", insertion="bisect")
    assert seq.ties is TiePolicy.OLDEST_FIRST
    assert seq.insertion is InsertMode.BISECT
    with pytest.raises(AttributeError):
        seq.compare = natural_order  # type: ignore[misc]


def test_top_k() -> None:
    seq = _build(natural_order, 3, 1, 2)
    assert seq.top(0) == []
    assert seq.top(2) == [3, 2]
    assert seq.top(10) == [3, 2, 1]
    with pytest.raises(ValueError):
        seq.top(-1)


def test_top_k_validates_k_like_a_rank() -> None:
    seq = _build(natural_order, 3, 1, 2)
    assert seq.top(np.int64(2)) == [3, 2]
    with pytest.raises(TypeError):
        seq.top(True)
    with pytest.raises(TypeError):
        seq.top(1.5)  # type: ignore[arg-type]


def test_iteration_is_a_snapshot() -> None:
    seq = _build(natural_order, 1, 2)
    seen = []
    for x in seq:
        seen.append(x)
        if len(seen) == 1:
            seq.insert(99)
    assert seen == [2, 1]
    assert list(seq) == [99, 2, 1]


def test_repr_names_strategy_and_policies() -> None:
    text = repr(_build(by_field("kindness"), {"kindness": 1}))
    assert "by_field('kindness')" in text
    assert "newest_first" in text
    assert "linear" in text


# ------------------------- properties ------------------------- #

@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(min_value=-50, max_value=50), max_size=60))
def test_length_grows_by_exactly_one(xs) -> None:
    seq = RankedSequence()
    for count, x in enumerate(xs, start=1):
        seq.insert(x)
        assert len(seq) == count
        seq.get_at(count - 1)
        assert len(seq) == count


@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(min_value=-50, max_value=50), max_size=60))
def test_adjacent_items_never_compare_less(xs) -> None:
    seq = RankedSequence(insertion="bisect")
    seq.extend(xs)
    ranked = list(seq)
    assert all(natural_order(a, b) is not Ordering.LESS for a, b in zip(ranked, ranked[1:]))
