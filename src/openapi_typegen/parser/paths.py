"""Index the document's operations by the types they reference.

For every path + HTTP method pair this module records the operation's tags
and the canonical names of all types reachable from its request and
response bodies. Local ``$ref`` targets are followed recursively (with a
``seen`` set, so cyclic schemas terminate); external references contribute
their name but are never entered.

The result feeds two consumers:

* :func:`~openapi_typegen.generator.split.assign_schema_to_group`, which
  groups types by the operations that use them;
* :func:`build_endpoint_hints`, which produces the ``Used by:`` notes in
  generated doc comments.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from openapi_typegen.models import EndpointHint, OperationRefs, SpecVersion
from openapi_typegen.naming import UNKNOWN_TYPE, ref_to_type_name
from openapi_typegen.parser.refs import collect_refs

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options", "trace")


def collect_refs_from_paths(spec: Mapping[str, Any], version: SpecVersion) -> list[OperationRefs]:
    """Collect tags and referenced type names for each operation in ``paths``.

    Args:
        spec: The raw document.
        version: Its dialect; selects where request/response schemas live.

    Returns:
        One :class:`~openapi_typegen.models.OperationRefs` per operation, in
        document order. Empty when the document has no ``paths``.
    """
    paths = spec.get("paths")
    if not isinstance(paths, Mapping):
        return []

    result: list[OperationRefs] = []
    for path, path_item in paths.items():
        if not isinstance(path_item, Mapping):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, Mapping):
                continue
            if version == SpecVersion.OPENAPI3:
                schemas = _oas3_operation_schemas(spec, operation)
            else:
                schemas = _oas2_operation_schemas(spec, path_item, operation)

            type_names: dict[str, None] = {}
            seen: set[str] = set()
            for schema in schemas:
                for name in _collect_type_names(schema, spec, seen):
                    type_names.setdefault(name, None)

            tags = operation.get("tags")
            result.append(
                OperationRefs(
                    path=str(path),
                    method=method,
                    tags=[str(t) for t in tags] if isinstance(tags, list) else [],
                    refs=list(type_names),
                )
            )
    return result


def build_endpoint_hints(
    operations: list[OperationRefs],
    type_names: Mapping[str, Any],
) -> dict[str, list[EndpointHint]]:
    """Map each registry type to the endpoints that reference it.

    Names that are not keys of *type_names* are skipped.
    """
    hints: dict[str, list[EndpointHint]] = {}
    for op in operations:
        endpoint = EndpointHint(method=op.method.upper(), path=op.path)
        for ref in op.refs:
            if ref in type_names:
                hints.setdefault(ref, []).append(endpoint)
    return hints


def resolve_local_ref(spec: Mapping[str, Any], ref: str) -> Optional[Any]:
    """Return the value a local ``#/...`` pointer designates, or ``None``.

    External and relative-file pointers, and pointers that lead nowhere,
    all return ``None``.
    """
    if not ref.startswith("#/"):
        return None
    current: Any = spec
    for segment in ref[2:].split("/"):
        if not segment:
            continue
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current


def _collect_type_names(schema: Any, spec: Mapping[str, Any], seen: set[str]) -> list[str]:
    names: list[str] = []
    for ref in collect_refs(schema):
        name = ref_to_type_name(ref)
        if name == UNKNOWN_TYPE:
            continue
        names.append(name)
        if ref in seen:
            continue
        seen.add(ref)
        target = resolve_local_ref(spec, ref)
        if isinstance(target, (Mapping, list)):
            names.extend(_collect_type_names(target, spec, seen))
    return names


def _deref(spec: Mapping[str, Any], obj: Any) -> Any:
    """Follow a chain of local ``$ref`` objects (response, request body, parameter)."""
    seen: set[str] = set()
    while isinstance(obj, Mapping) and isinstance(obj.get("$ref"), str):
        ref = obj["$ref"]
        if ref in seen:
            return None
        seen.add(ref)
        target = resolve_local_ref(spec, ref)
        if target is None:
            return obj
        obj = target
    return obj


def _content_schemas(content: Any) -> list[Any]:
    if not isinstance(content, Mapping):
        return []
    return [
        media["schema"]
        for media in content.values()
        if isinstance(media, Mapping) and media.get("schema") is not None
    ]


def _oas3_operation_schemas(spec: Mapping[str, Any], operation: Mapping[str, Any]) -> list[Any]:
    """Response and request body schemas of an OpenAPI 3 operation, all media types."""
    schemas: list[Any] = []
    responses = operation.get("responses")
    if isinstance(responses, Mapping):
        for response in responses.values():
            response = _deref(spec, response)
            if isinstance(response, Mapping):
                schemas.extend(_content_schemas(response.get("content")))
    body = _deref(spec, operation.get("requestBody"))
    if isinstance(body, Mapping):
        schemas.extend(_content_schemas(body.get("content")))
    return schemas


def _oas2_operation_schemas(
    spec: Mapping[str, Any],
    path_item: Mapping[str, Any],
    operation: Mapping[str, Any],
) -> list[Any]:
    """Response schemas and ``in: body`` parameter schemas of a Swagger 2 operation."""
    schemas: list[Any] = []
    responses = operation.get("responses")
    if isinstance(responses, Mapping):
        for response in responses.values():
            response = _deref(spec, response)
            if isinstance(response, Mapping) and response.get("schema") is not None:
                schemas.append(response["schema"])

    parameters: list[Any] = []
    for source in (path_item.get("parameters"), operation.get("parameters")):
        if isinstance(source, list):
            parameters.extend(source)
    for param in parameters:
        param = _deref(spec, param)
        if isinstance(param, Mapping) and param.get("in") == "body" and param.get("schema") is not None:
            schemas.append(param["schema"])
    return schemas
