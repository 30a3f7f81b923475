"""Collect ``$ref`` pointers from an arbitrary parsed document tree.

The collector is used twice: once by the extractor on the loaded document,
and again by the resolver on every fetched external document to discover
further external addresses.
"""

from __future__ import annotations

from typing import Any, Optional

_EXTERNAL_PREFIXES = ("http://", "https://")


def collect_refs(obj: Any, refs: Optional[dict[str, None]] = None) -> list[str]:
    """Return every ``$ref`` string found anywhere inside *obj*.

    Walks dicts and lists depth-first. Each pointer is reported once, in the
    order it is first encountered, so callers iterating the result get the
    same order on every run.

    Args:
        obj: Any parsed JSON/YAML value.
        refs: Accumulator used by the recursion; callers normally omit it.

    Returns:
        The distinct ``$ref`` values, in discovery order.
    """
    if refs is None:
        refs = {}
    _walk(obj, refs)
    return list(refs)


def _walk(obj: Any, refs: dict[str, None]) -> None:
    if isinstance(obj, list):
        for item in obj:
            _walk(item, refs)
        return
    if not isinstance(obj, dict):
        return
    ref = obj.get("$ref")
    if isinstance(ref, str):
        refs.setdefault(ref, None)
    for value in obj.values():
        _walk(value, refs)


def is_external_ref(ref: str) -> bool:
    """True if *ref* points into another document by absolute HTTP(S) URL."""
    return ref.startswith(_EXTERNAL_PREFIXES)


def get_base_url(ref: str) -> str:
    """Strip the fragment from *ref*, leaving the fetchable document address."""
    base, _, _ = ref.partition("#")
    return base
