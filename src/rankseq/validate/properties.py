"""
Property helpers for validating ranked output.

These functions provide lightweight checks you can use in tests and inside
the benchmark runner for sanity validation.

Public API (stable):
    is_nonincreasing(xs: Sequence, compare) -> bool
    first_order_violation_index(xs: Sequence, compare) -> int | None
    is_permutation(a: Sequence, b: Sequence) -> bool
    permutation_counter_diff(a: Sequence, b: Sequence) -> dict

Notes
-----
- "Nonincreasing" is under the comparator, not under ``<=``: adjacent items
  must never compare LESS (the front item never ranks below the next one).
- The permutation helpers count values with ``collections.Counter``, so
  items must be hashable. Records given as dicts are not; compare a hashable
  projection of them instead (e.g. ``tuple(r.values())``).
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Sequence

from rankseq.ordering.compare import Comparator, Ordering


__all__ = [
    "is_nonincreasing",
    "first_order_violation_index",
    "is_permutation",
    "permutation_counter_diff",
]


def is_nonincreasing(xs: Sequence[Any], compare: Comparator) -> bool:
    """Return True iff compare(xs[i], xs[i+1]) is never LESS."""
    return first_order_violation_index(xs, compare) is None


def first_order_violation_index(xs: Sequence[Any], compare: Comparator) -> int | None:
    """
    Return the first index i where xs[i] ranks below xs[i+1], or None.

    Useful for precise error messages:
        i = first_order_violation_index(out, compare)
        assert i is None, f"out of order at i={i}: {out[i]} < {out[i+1]}"
    """
    for i in range(len(xs) - 1):
        if Ordering.of(compare(xs[i], xs[i + 1])) is Ordering.LESS:
            return i
    return None


def is_permutation(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """
    Return True iff `a` and `b` contain exactly the same multiset of values.
    """
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Any], b: Sequence[Any]) -> Dict[Any, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities.
    Positive values indicate extra occurrences in `a`, negative in `b`.
    """
    ca, cb = Counter(a), Counter(b)
    # Counter subtraction drops non-positive counts, so take both directions.
    diff: Dict[Any, int] = dict(ca - cb)
    diff.update((k, -d) for k, d in (cb - ca).items())
    return diff
