"""
Datasets package public API.

Re-export the generators so callers can write:
    from rankseq.datasets import make_dataset, make_records, SUPPORTED_DISTS
"""

from .generators import SUPPORTED_DISTS, make_dataset, make_records

__all__ = ["make_dataset", "make_records", "SUPPORTED_DISTS"]
