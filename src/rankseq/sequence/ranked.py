"""
Ranked sequence: items kept best-first under an injected comparator.

The comparator is bound once, at construction, and cannot be swapped later.
Every insertion restores the order invariant before returning:

    for i < j:  compare(items[i], items[j]) is GREATER or EQUAL

Tie policy
----------
Equal items are placed deterministically, chosen at construction:

- ``TiePolicy.NEWEST_FIRST`` (default): a newcomer goes immediately before
  the first resident it compares EQUAL to, so among equals the most recently
  inserted comes first.
- ``TiePolicy.OLDEST_FIRST``: a newcomer goes after every resident it
  compares EQUAL to (stable in insertion order).

Insertion modes
---------------
- ``InsertMode.LINEAR`` (default): scan from the front; O(n) comparisons.
- ``InsertMode.BISECT``: binary search for the same position; O(log n)
  comparisons. Both modes place items identically as long as the comparator
  is consistent. The list insert itself stays O(n) either way.

Conventions:
- Ranks are zero-based; rank 0 is the best item.
- Negative ranks are out of range; they are *not* counted from the end.
- A misbehaving comparator (non-transitive, non-deterministic) can break
  the invariant silently. That is a caller precondition, not a detected error.
"""

from __future__ import annotations

import bisect
import enum
import operator
from typing import Any, Callable, Generic, Iterable, Iterator, List, TypeVar

import numpy as np

from rankseq.errors import RankOutOfRangeError
from rankseq.ordering.compare import Comparator, Ordering, natural_order

T = TypeVar("T")

__all__ = ["TiePolicy", "InsertMode", "RankedSequence"]


class TiePolicy(str, enum.Enum):
    NEWEST_FIRST = "newest_first"
    OLDEST_FIRST = "oldest_first"


class InsertMode(str, enum.Enum):
    LINEAR = "linear"
    BISECT = "bisect"


class RankedSequence(Generic[T]):
    """
    A growing sequence of items ordered best-first by `compare`.

    Parameters
    ----------
    compare : Comparator
        Three-way comparator; ``compare(a, b) > 0`` means `a` ranks above `b`.
        Defaults to ``natural_order`` (the item type's own ``<`` / ``>``).
    ties : TiePolicy | str
        Placement of items equal to a resident. See module docstring.
    insertion : InsertMode | str
        How the insertion position is searched for.
    """

    def __init__(
        self,
        compare: Comparator = natural_order,
        *,
        ties: TiePolicy | str = TiePolicy.NEWEST_FIRST,
        insertion: InsertMode | str = InsertMode.LINEAR,
    ) -> None:
        if not callable(compare):
            raise TypeError(f"compare must be callable; got {compare!r}")
        self._compare = compare
        self._ties = _coerce(TiePolicy, ties, "ties")
        self._insertion = _coerce(InsertMode, insertion, "insertion")
        self._items: List[T] = []

    # ------------------------- read-only configuration ------------------------- #

    @property
    def compare(self) -> Comparator:
        return self._compare

    @property
    def ties(self) -> TiePolicy:
        return self._ties

    @property
    def insertion(self) -> InsertMode:
        return self._insertion

    # ------------------------- operations ------------------------- #

    def insert(self, item: T) -> int:
        """
        Insert `item` at the position that keeps the sequence best-first.

        Returns the rank the item landed at. Always succeeds; the length
        grows by exactly one and residents keep their relative order.
        """
        stops_here = self._stop_predicate(item)
        if self._insertion is InsertMode.BISECT:
            # stops_here is False for a prefix of residents and True after it
            pos = bisect.bisect_left(self._items, True, key=stops_here)
        else:
            pos = next(
                (i for i, resident in enumerate(self._items) if stops_here(resident)),
                len(self._items),
            )
        self._items.insert(pos, item)
        return pos

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.insert(item)

    def get_at(self, rank: int) -> T:
        """
        Return the item at zero-based `rank` (0 = best).

        Raises
        ------
        RankOutOfRangeError
            If ``rank < 0`` or ``rank >= len(self)``.
        TypeError
            If `rank` is not an integer.
        """
        rank = _as_index(rank, "rank")
        if rank < 0 or rank >= len(self._items):
            raise RankOutOfRangeError(rank, len(self._items))
        return self._items[rank]

    def top(self, k: int) -> List[T]:
        """Return the best ``min(k, len(self))`` items, best first."""
        k = _as_index(k, "k")
        if k < 0:
            raise ValueError(f"k must be nonnegative; got {k}")
        return self._items[:k]

    # ------------------------- container protocol ------------------------- #

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __getitem__(self, rank: int) -> T:
        return self.get_at(rank)

    def __repr__(self) -> str:
        name = getattr(self._compare, "__name__", None) or repr(self._compare)
        return (
            f"RankedSequence({self._items!r}, compare={name}, "
            f"ties={self._ties.value}, insertion={self._insertion.value})"
        )

    # ------------------------- helpers ------------------------- #

    def _stop_predicate(self, item: T) -> Callable[[Any], bool]:
        """
        Predicate that is True for the resident the newcomer goes in front of.

        NEWEST_FIRST stops at the first resident that does not strictly
        outrank the newcomer; OLDEST_FIRST only at one strictly below it.
        """
        compare = self._compare
        if self._ties is TiePolicy.NEWEST_FIRST:
            return lambda resident: Ordering.of(compare(resident, item)) is not Ordering.GREATER
        return lambda resident: Ordering.of(compare(resident, item)) is Ordering.LESS


def _as_index(value: Any, what: str) -> int:
    # NumPy integers pass through __index__; booleans are not ranks.
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"{what} must be an int; got {type(value).__name__}")
    try:
        return operator.index(value)
    except TypeError as e:
        raise TypeError(f"{what} must be an int; got {type(value).__name__}") from e


def _coerce(enum_cls: Any, value: Any, what: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as e:
        choices = [m.value for m in enum_cls]
        raise ValueError(f"{what} must be one of {choices}; got {value!r}") from e
