"""
rankseq: a best-first ranked sequence with pluggable comparison strategies.

    from rankseq import RankedSequence, by_field

    seq = RankedSequence(by_field("kindness"))
    seq.insert({"kindness": 5})
    seq.insert({"kindness": 7})
    seq.get_at(0)   # {"kindness": 7}
"""

from .errors import RankOutOfRangeError, RankSeqError
from .ordering import (
    Comparator,
    Ordering,
    by_field,
    by_key,
    by_sum,
    chain,
    natural_order,
    reverse,
    strategy_from_spec,
)
from .sequence import InsertMode, RankedSequence, TiePolicy

__version__ = "0.1.0"

__all__ = [
    "RankedSequence",
    "TiePolicy",
    "InsertMode",
    "Ordering",
    "Comparator",
    "natural_order",
    "reverse",
    "chain",
    "by_key",
    "by_field",
    "by_sum",
    "strategy_from_spec",
    "RankSeqError",
    "RankOutOfRangeError",
]
