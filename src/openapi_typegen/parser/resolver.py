"""Resolve a loaded document into a flat, canonically named type registry.

Two kinds of ``$ref`` pointers are handled differently:

* **Local** pointers (``#/...``) are left in place as strings. The emitter
  looks the target up by name in the finished registry, so self-referencing
  and mutually referencing schemas never need to be expanded and cannot
  recurse.
* **External** pointers (``https://host/doc.json#/Thing``) name another
  document. Each distinct document is fetched once through the caller's
  resolver; its schemas are merged into the registry, and any external
  pointers *it* contains are queued in turn.

The single public function is :func:`resolve`.
"""

from __future__ import annotations

import inspect
from collections import deque
from collections.abc import Mapping
from typing import Any

from openapi_typegen.exceptions import ResolutionError, SpecLoadError
from openapi_typegen.models import LoadResult, ResolvedSchemaMap, Resolver, SchemaNode
from openapi_typegen.naming import to_pascal_case
from openapi_typegen.output import debug
from openapi_typegen.parser.extractor import extract_document_schemas
from openapi_typegen.parser.refs import collect_refs, get_base_url, is_external_ref


async def resolve(load_result: LoadResult, resolver: Resolver) -> ResolvedSchemaMap:
    """Build the type registry for *load_result*, fetching external documents.

    Local schemas are deep-copied and keyed by their PascalCase name first.
    Then the external fetch worklist is drained breadth-first: the pending
    queue and the ``fetched`` set are both keyed by base address, so each
    document is requested exactly once even when it is referenced from many
    places or references itself. Fetched schemas are merged only under
    names not already present, so local schemas win over external ones and
    the first-fetched document wins among externals.

    Args:
        load_result: Output of :func:`~openapi_typegen.parser.loader.load`.
        resolver: Called with each base address. May return the document
            directly or an awaitable of it.

    Returns:
        Canonical type name -> schema, local schemas first, in document order.

    Raises:
        ResolutionError: If any fetch raises or returns a non-object. No
            partial registry is returned.
    """
    result: ResolvedSchemaMap = {}
    for name, schema in load_result.registry.items():
        result[to_pascal_case(name)] = schema.model_copy(deep=True)

    pending: deque[str] = deque()
    queued: set[str] = set()
    fetched: set[str] = set()
    _enqueue_external(load_result.refs, pending, queued, fetched)

    fetched_docs: list[dict[str, SchemaNode]] = []
    while pending:
        base_url = pending.popleft()
        queued.discard(base_url)
        if base_url in fetched:
            continue
        fetched.add(base_url)

        debug(f"Fetching external $ref document: {base_url}")
        raw = await _fetch(base_url, resolver)
        try:
            fetched_docs.append(extract_document_schemas(raw))
        except SpecLoadError as exc:
            raise ResolutionError(base_url, str(exc)) from exc
        _enqueue_external(collect_refs(raw), pending, queued, fetched)

    for doc in fetched_docs:
        for name, schema in doc.items():
            result.setdefault(to_pascal_case(name), schema)

    if fetched:
        debug(f"Resolved {len(result)} type(s) using {len(fetched)} external document(s)")
    return result


async def _fetch(base_url: str, resolver: Resolver) -> Mapping[str, Any]:
    """Call *resolver* for one address, normalising every failure to :class:`ResolutionError`."""
    try:
        raw = resolver(base_url)
        if inspect.isawaitable(raw):
            raw = await raw
    except Exception as exc:
        raise ResolutionError(base_url, str(exc)) from exc
    if not isinstance(raw, Mapping):
        raise ResolutionError(
            base_url, f"Resolver returned non-object ({type(raw).__name__})"
        )
    return raw


def _enqueue_external(
    refs: list[str],
    pending: deque[str],
    queued: set[str],
    fetched: set[str],
) -> None:
    for ref in refs:
        if not is_external_ref(ref):
            continue
        base_url = get_base_url(ref)
        if base_url in fetched or base_url in queued:
            continue
        queued.add(base_url)
        pending.append(base_url)
