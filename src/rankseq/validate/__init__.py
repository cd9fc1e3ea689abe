"""
Validation utilities public API.

Re-exports:
    - Oracle:
        ORACLE_NAME
        oracle_rank
        equals_oracle

    - Property checks:
        is_nonincreasing
        first_order_violation_index
        is_permutation
        permutation_counter_diff
"""

from .oracle import ORACLE_NAME, equals_oracle, oracle_rank
from .properties import (
    first_order_violation_index,
    is_nonincreasing,
    is_permutation,
    permutation_counter_diff,
)

__all__ = [
    "ORACLE_NAME",
    "oracle_rank",
    "equals_oracle",
    "is_nonincreasing",
    "first_order_violation_index",
    "is_permutation",
    "permutation_counter_diff",
]
