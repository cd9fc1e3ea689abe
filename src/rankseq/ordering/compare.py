"""
Three-way comparison primitives.

A comparator is any callable ``compare(a, b)`` returning a signed integer
(or an ``Ordering``). The convention throughout the package is *rank*
oriented: ``compare(a, b) > 0`` means `a` ranks above `b` (is "better"),
so a ranked sequence keeps GREATER items in front.

Two flavours share that contract and differ only in binding time:

- intrinsic: ``natural_order`` delegates to the item type's own ``<`` / ``>``
  operators, i.e. the one ordering the type chose when it was defined;
- extrinsic: any caller-supplied comparator, picked per use site. Several may
  exist for the same item type (see ``rankseq.ordering.strategies``).

Public API (stable):
    Ordering
    Comparator
    natural_order(a, b) -> Ordering
    reverse(compare) -> Comparator
    chain(*compares) -> Comparator
    counting(compare) -> CountingComparator
"""

from __future__ import annotations

import enum
from typing import Any, Callable

import numpy as np

Comparator = Callable[[Any, Any], int]

__all__ = [
    "Ordering",
    "Comparator",
    "natural_order",
    "reverse",
    "chain",
    "counting",
    "CountingComparator",
]


class Ordering(enum.IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1

    @classmethod
    def of(cls, value: Any) -> "Ordering":
        """
        Normalise a comparator result to an ``Ordering`` by its sign.

        Accepts Python ints (``Ordering`` included) and NumPy integers.
        ``bool`` is rejected even though it subclasses ``int``: a comparator
        returning True/False is almost always a ``<`` predicate by mistake.

        Raises
        ------
        TypeError
            If `value` is not an integer.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
            raise TypeError(
                f"comparator must return a signed integer or Ordering; got {value!r}"
            )
        if value < 0:
            return cls.LESS
        if value > 0:
            return cls.GREATER
        return cls.EQUAL


def natural_order(a: Any, b: Any) -> Ordering:
    """Intrinsic ordering: larger under the type's own operators ranks higher."""
    if a > b:
        return Ordering.GREATER
    if a < b:
        return Ordering.LESS
    return Ordering.EQUAL


def reverse(compare: Comparator) -> Comparator:
    """Return a comparator ranking in the opposite direction of `compare`."""

    def _reversed(a: Any, b: Any) -> Ordering:
        return Ordering(-Ordering.of(compare(a, b)))

    _reversed.__name__ = f"reverse({_name_of(compare)})"
    return _reversed


def chain(*compares: Comparator) -> Comparator:
    """
    Lexicographic composition: the first comparator that does not report
    EQUAL decides; later ones only break ties.
    """
    if not compares:
        raise ValueError("chain() needs at least one comparator")

    def _chained(a: Any, b: Any) -> Ordering:
        for compare in compares:
            result = Ordering.of(compare(a, b))
            if result is not Ordering.EQUAL:
                return result
        return Ordering.EQUAL

    _chained.__name__ = "chain(" + ", ".join(_name_of(c) for c in compares) + ")"
    return _chained


class CountingComparator:
    """Wraps a comparator and counts how many times it was called."""

    def __init__(self, compare: Comparator) -> None:
        self._compare = compare
        self.calls = 0

    def __call__(self, a: Any, b: Any) -> int:
        self.calls += 1
        return self._compare(a, b)

    def reset(self) -> None:
        self.calls = 0

    def __repr__(self) -> str:
        return f"CountingComparator({_name_of(self._compare)}, calls={self.calls})"


def counting(compare: Comparator) -> CountingComparator:
    return CountingComparator(compare)


def _name_of(compare: Comparator) -> str:
    return getattr(compare, "__name__", None) or repr(compare)
