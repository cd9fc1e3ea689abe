"""
Extrinsic comparison strategies.

These build comparators from outside the item type, so the same items can be
ranked differently at different use sites:

    by_field("talkativity")        # higher talkativity ranks first
    by_field("kindness")           # same items, another ranking
    by_sum("talkativity", "funniness", "kindness")

Items may be mappings (``item["kindness"]``) or plain objects
(``item.kindness``); ``by_field`` and ``by_sum`` accept both.

Config form (used by the benchmark runner):

    {"kind": "natural"}
    {"kind": "field", "field": "kindness"}
    {"kind": "sum", "fields": ["talkativity", "funniness", "kindness"]}

    Optional on any of them:
        "reverse": true               # lowest first
        "then": { ...another spec }   # tie-breaker

Public API (stable):
    by_key(key) -> Comparator
    by_field(name) -> Comparator
    by_sum(*names) -> Comparator
    strategy_from_spec(spec: dict) -> Comparator
    STRATEGY_KINDS
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict

from .compare import Comparator, Ordering, chain, natural_order, reverse

STRATEGY_KINDS = {"natural", "field", "sum"}

__all__ = ["STRATEGY_KINDS", "by_key", "by_field", "by_sum", "strategy_from_spec"]


def by_key(key: Callable[[Any], Any]) -> Comparator:
    """Compare items by ``key(item)`` under natural order."""

    def _by_key(a: Any, b: Any) -> Ordering:
        return natural_order(key(a), key(b))

    _by_key.__name__ = f"by_key({getattr(key, '__name__', repr(key))})"
    return _by_key


def by_field(name: str) -> Comparator:
    compare = by_key(lambda item: _get_field(item, name))
    compare.__name__ = f"by_field({name!r})"
    return compare


def by_sum(*names: str) -> Comparator:
    """Compare items by the sum of the named integer fields."""
    if not names:
        raise ValueError("by_sum() needs at least one field name")
    compare = by_key(lambda item: sum(_get_field(item, n) for n in names))
    compare.__name__ = f"by_sum({', '.join(repr(n) for n in names)})"
    return compare


def strategy_from_spec(spec: Dict[str, Any]) -> Comparator:
    """
    Build a comparator from a config mapping (see module docstring).

    Raises
    ------
    ValueError
        If the spec is not a dict, names an unknown kind, or misses the
        parameters its kind requires.
    """
    if not isinstance(spec, dict):
        raise ValueError("strategy spec must be a dict")

    kind = spec.get("kind", None)
    if kind not in STRATEGY_KINDS:
        raise ValueError(
            f"Unsupported strategy kind: {kind!r}. Supported: {sorted(STRATEGY_KINDS)}"
        )

    if kind == "natural":
        compare: Comparator = natural_order
    elif kind == "field":
        field = spec.get("field", None)
        if not field or not isinstance(field, str):
            raise ValueError("field strategy requires a string 'field'")
        compare = by_field(field)
    else:
        fields = spec.get("fields", None)
        if not isinstance(fields, (list, tuple)) or not fields:
            raise ValueError("sum strategy requires a non-empty list 'fields'")
        if not all(isinstance(f, str) for f in fields):
            raise ValueError("sum strategy 'fields' must all be strings")
        compare = by_sum(*fields)

    flip = spec.get("reverse", False)
    if not isinstance(flip, bool):
        raise ValueError(f"{kind} strategy 'reverse' must be a bool; got {flip!r}")
    if flip:
        compare = reverse(compare)

    then = spec.get("then", None)
    if then is not None:
        compare = chain(compare, strategy_from_spec(then))

    return compare


def _get_field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)
