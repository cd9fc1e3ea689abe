"""
Input generators for ranked-sequence runs.

Integer lists (``make_dataset``):
- "random":        uniform draws from an inclusive ``params["range"]``.
- "nearly_sorted": [0, 1, ..., n-1] degraded by ceil(swap_frac * n) random
                   index swaps. Close to the *worst* case for a best-first
                   linear scan, since each newcomer tends to outrank everyone.
- "few_uniques":   at most k distinct values, so most insertions hit ties.
- "small_range":   like "random" over a small span, default [0, 255].
- "reversed":      [n-1, ..., 0]; every newcomer lands at the end.

Records (``make_records``):
    A list of dict records, one integer per name in ``spec["fields"]``,
    each field drawn independently from the same integer distribution:

        {
            "dist": "small_range",
            "params": {"max_val": 10},
            "fields": ["talkativity", "funniness", "kindness"]
        }

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]
    make_records(n: int, spec: dict, rng: numpy.random.Generator) -> list[dict]

Conventions:
- Every range is **inclusive** on both ends.
- Integer outputs are plain Python ints (the library stays NumPy-agnostic).
- The caller supplies the RNG; "reversed" ignores it.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

import numpy as np

__all__ = ["SUPPORTED_DISTS", "make_dataset", "make_records"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate an integer list of length `n` according to `spec`.

    Parameters
    ----------
    n : int
        Number of elements. Must be >= 0.
    spec : dict
        ``{"dist": <name>, "params": {...}}``; see module docstring.
    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Raises
    ------
    ValueError
        If inputs are invalid or the distribution is unsupported.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"n must be a nonnegative int; got {n!r}")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in _GENERATORS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params", None) or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")

    # Parse params even for n == 0 so bad configs fail early.
    return _GENERATORS[dist](n, params, rng)


def make_records(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Dict[str, int]]:
    """Generate `n` dict records with one integer per field in ``spec["fields"]``."""
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")
    fields = spec.get("fields", None)
    if not isinstance(fields, (list, tuple)) or not fields:
        raise ValueError("records spec requires a non-empty list 'fields'")
    if len(set(fields)) != len(fields) or not all(isinstance(f, str) for f in fields):
        raise ValueError(f"records 'fields' must be distinct strings; got {fields!r}")

    columns = {field: make_dataset(n, spec, rng) for field in fields}
    return [{field: columns[field][i] for field in fields} for i in range(n)]


# ------------------------- distributions ------------------------- #


def _random(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    lo, hi = _parse_range(params, "random", default=None)
    return _uniform(n, lo, hi, rng)


def _small_range(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    if "range" in params:
        lo, hi = _parse_range(params, "small_range", default=(0, 255))
    else:
        lo_raw, hi_raw = params.get("min_val", 0), params.get("max_val", 255)
        if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
            raise ValueError("small_range params.min_val/max_val must be integers")
        lo, hi = int(lo_raw), int(hi_raw)
        if lo > hi:
            raise ValueError(f"small_range invalid: min > max ({lo} > {hi})")
    return _uniform(n, lo, hi, rng)


def _nearly_sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    raw = params.get("swap_frac", 0.05)
    try:
        swap_frac = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {raw!r}"
        ) from e
    if not (0.0 <= swap_frac <= 1.0):
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {swap_frac}")

    arr = list(range(n))
    num_swaps = int(np.ceil(swap_frac * n))
    if num_swaps <= 0:
        return arr
    idxs = rng.integers(0, n, size=(num_swaps, 2))
    for i, j in idxs.tolist():
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def _few_uniques(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    k = params.get("k", None)
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    lo, hi = _parse_range(params, "few_uniques", default=(0, 4294967295))
    if n == 0:
        return []

    # Distinct values drawn from the caller's RNG, at most min(k, n, span).
    actual_k = int(min(k, n, hi - lo + 1))
    chosen: List[int] = []
    seen = set()
    while len(chosen) < actual_k:
        for v in rng.integers(lo, hi + 1, size=2 * (actual_k - len(chosen))).tolist():
            if v not in seen:
                seen.add(v)
                chosen.append(v)
                if len(chosen) == actual_k:
                    break
    return [chosen[t] for t in rng.integers(0, actual_k, size=n).tolist()]


def _reversed(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return list(range(n - 1, -1, -1))


_GENERATORS: Dict[str, Callable[[int, Dict[str, Any], np.random.Generator], List[int]]] = {
    "random": _random,
    "nearly_sorted": _nearly_sorted,
    "few_uniques": _few_uniques,
    "small_range": _small_range,
    "reversed": _reversed,
}

SUPPORTED_DISTS = set(_GENERATORS)


# ------------------------- helpers ------------------------- #


def _uniform(n: int, lo: int, hi: int, rng: np.random.Generator) -> List[int]:
    if n == 0:
        return []
    # Generator.integers is half-open; +1 makes `hi` inclusive.
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _parse_range(
    params: Dict[str, Any], dist: str, default: Tuple[int, int] | None
) -> Tuple[int, int]:
    """Parse ``params["range"] == [min, max]`` (inclusive); required when `default` is None."""
    if "range" not in params:
        if default is None:
            raise ValueError(f"{dist}.params.range must be provided as [min, max] (inclusive)")
        return default
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError(f"{dist}.params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError(f"{dist}.params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"{dist}.params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
