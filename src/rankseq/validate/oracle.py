"""
Oracle for ranked-sequence correctness.

We use Python's built-in `sorted()` with `functools.cmp_to_key` as the
ground-truth oracle:
- Correct order for any consistent comparator
- Deterministic and portable
- Stable, which pins down the placement of equal items

Tie handling mirrors the ranked sequence:
- newest_first: sort the *reversed* insertion order, descending. Stability
  keeps equal items in reversed insertion order (newest first).
- oldest_first: sort the insertion order, descending. Equal items keep their
  insertion order.

Public API (stable):
    oracle_rank(items, compare, ties) -> list
    equals_oracle(items, out, compare, ties) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- Every insertion mode must match the oracle output exactly.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, List, Sequence

from rankseq.ordering.compare import Comparator
from rankseq.sequence.ranked import TiePolicy

ORACLE_NAME: str = "python_sorted_cmp_to_key"

__all__ = ["ORACLE_NAME", "oracle_rank", "equals_oracle"]


def oracle_rank(
    items: Sequence[Any],
    compare: Comparator,
    ties: TiePolicy | str = TiePolicy.NEWEST_FIRST,
) -> List[Any]:
    """
    Return the ground-truth best-first order for `items` inserted in order.

    Parameters
    ----------
    items : sequence
        Items in insertion order. The oracle does not mutate `items`.
    compare : Comparator
        The ranking comparator.
    ties : TiePolicy | str
        Placement of equal items.

    Returns
    -------
    list
        A new list with the same elements as `items`, best first.
    """
    ordered = list(items)
    if TiePolicy(ties) is TiePolicy.NEWEST_FIRST:
        ordered.reverse()
    # `reverse=True` keeps the relative order of equal elements.
    return sorted(ordered, key=cmp_to_key(compare), reverse=True)


def equals_oracle(
    items: Sequence[Any],
    out: Sequence[Any],
    compare: Comparator,
    ties: TiePolicy | str = TiePolicy.NEWEST_FIRST,
) -> bool:
    """
    Check whether a ranked output matches the oracle exactly.

    Items are compared by identity, so two equal-valued but distinct
    objects in swapped positions count as a mismatch.
    """
    expected = oracle_rank(items, compare, ties)
    if len(expected) != len(out):
        return False
    return all(x is y for x, y in zip(expected, out))
