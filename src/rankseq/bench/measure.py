"""
Timing harness for building ranked sequences.

One sample = one call to ``build_fn(items)``, which constructs a fresh
ranked sequence and inserts every item. Everything else (GC, warmup) happens
outside the timed block.

Public API (stable):
    time_build_call(...) -> dict

Returned dict schema:
    {
        "variant": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
        "last_output": Any,                 # what the last successful build returned
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Callable, Dict, List, Sequence

__all__ = ["time_build_call"]

logger = logging.getLogger(__name__)


def time_build_call(
    *,
    variant_name: str,
    build_fn: Callable[[Sequence[Any]], Any],
    items: Sequence[Any],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
) -> Dict[str, Any]:
    """
    Time repeated calls to `build_fn(items)`.

    Parameters
    ----------
    variant_name : str
        Logical name of the variant (for logs/records).
    build_fn : Callable[[Sequence], Any]
        Builds a ranked sequence from `items`. Must not mutate `items`.
    items : sequence
        Items in insertion order.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, make one untimed call before timing.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample threshold. A single call exceeding it marks status="timeout"
        and stops further sampling.

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "variant": variant_name,
        "repeats": repeats,
        "samples_ns": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
        "last_output": None,
    }
    samples: List[int] = result["samples_ns"]

    if warmup and repeats > 0:
        try:
            build_fn(items)
        except Exception as e:
            logger.warning("%s: warmup failed: %r", variant_name, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                t0 = time.perf_counter_ns()
                out = build_fn(items)
                t1 = time.perf_counter_ns()
            except Exception as e:
                logger.warning("%s: run failed at repeat %d: %r", variant_name, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            samples.append(int(elapsed))
            result["last_output"] = out

            if elapsed > threshold_ns:
                logger.info(
                    "%s: sample %d took %.3fs (> %.3fs), stopping",
                    variant_name, r, elapsed / 1e9, timeout_seconds,
                )
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled.
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
