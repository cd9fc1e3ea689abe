"""
Sequence package public API.

Re-export the ranked sequence so callers can write:
    from rankseq.sequence import RankedSequence, TiePolicy, InsertMode
"""

from .ranked import InsertMode, RankedSequence, TiePolicy

__all__ = ["RankedSequence", "TiePolicy", "InsertMode"]
