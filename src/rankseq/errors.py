"""
Error classes for rankseq.

Only one runtime failure is defined for the ranked sequence itself: asking
for a rank that does not correspond to a held item. It is raised immediately
and never recovered internally, since there is no fallback value to hand back.

Configuration problems (bad dataset specs, bad strategy specs, bad runner
configs) raise plain ``ValueError`` with a message naming the offending key.
"""

from __future__ import annotations


class RankSeqError(Exception):
    """Base exception for rankseq."""
    pass


class RankOutOfRangeError(RankSeqError, IndexError):
    """
    Raised by ``RankedSequence.get_at`` when ``rank < 0`` or ``rank >= len``.

    Subclasses ``IndexError`` so callers iterating by rank can catch either.
    """

    def __init__(self, rank: int, length: int) -> None:
        self.rank = rank
        self.length = length
        super().__init__(f"rank {rank} out of range for sequence of length {length}")
