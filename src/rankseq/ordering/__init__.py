"""
Ordering package public API.

Re-exports:
    - Primitives:
        Ordering, Comparator, natural_order, reverse, chain, counting,
        CountingComparator

    - Strategies:
        STRATEGY_KINDS, by_key, by_field, by_sum, strategy_from_spec
"""

from .compare import (
    Comparator,
    CountingComparator,
    Ordering,
    chain,
    counting,
    natural_order,
    reverse,
)
from .strategies import STRATEGY_KINDS, by_field, by_key, by_sum, strategy_from_spec

__all__ = [
    "Ordering",
    "Comparator",
    "natural_order",
    "reverse",
    "chain",
    "counting",
    "CountingComparator",
    "STRATEGY_KINDS",
    "by_key",
    "by_field",
    "by_sum",
    "strategy_from_spec",
]
