"""Extract the named schema registry from a parsed OpenAPI document.

Where the schemas live depends on the dialect:

* Swagger 2.0 -- the top-level ``definitions`` object.
* OpenAPI 3.x -- ``components.schemas``.

External documents fetched during resolution are not full OpenAPI
documents, so :func:`extract_document_schemas` probes them more loosely.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from openapi_typegen.exceptions import SpecLoadError
from openapi_typegen.models import LoadResult, SchemaNode, SpecVersion
from openapi_typegen.parser.refs import collect_refs


def extract_schemas(spec: dict[str, Any], version: SpecVersion) -> LoadResult:
    """Build a :class:`~openapi_typegen.models.LoadResult` from a parsed document.

    Args:
        spec: The raw document, as returned by
            :func:`~openapi_typegen.parser.loader.load_spec`.
        version: The dialect reported by
            :func:`~openapi_typegen.parser.loader.detect_version`.

    Returns:
        The document, its schema registry (names as written), and every
        ``$ref`` found anywhere in it.

    Raises:
        SpecLoadError: If a schema entry cannot be read as a schema object.
    """
    if version == SpecVersion.OPENAPI2:
        schemas = spec.get("definitions")
    else:
        components = spec.get("components")
        schemas = components.get("schemas") if isinstance(components, Mapping) else None

    return LoadResult(
        version=version,
        spec=spec,
        registry=_to_registry(schemas if isinstance(schemas, Mapping) else {}),
        refs=collect_refs(spec),
    )


def extract_document_schemas(doc: Mapping[str, Any]) -> dict[str, SchemaNode]:
    """Extract the schemas of a fetched external document.

    Checks, in order:

    1. a ``definitions`` object (Swagger 2 style fragment files);
    2. a ``components.schemas`` object (OpenAPI 3 style);
    3. otherwise every object-valued top-level key is taken as a schema.

    Args:
        doc: The parsed external document.

    Returns:
        Schema name (as written) -> schema.
    """
    definitions = doc.get("definitions")
    if isinstance(definitions, Mapping):
        return _to_registry(definitions)

    components = doc.get("components")
    if isinstance(components, Mapping):
        schemas = components.get("schemas")
        if isinstance(schemas, Mapping):
            return _to_registry(schemas)

    return _to_registry(doc)


def _to_registry(schemas: Mapping[str, Any]) -> dict[str, SchemaNode]:
    registry: dict[str, SchemaNode] = {}
    for name, raw in schemas.items():
        if not isinstance(raw, Mapping):
            continue
        try:
            registry[str(name)] = SchemaNode.model_validate(dict(raw))
        except ValidationError as exc:
            raise SpecLoadError(f"Invalid schema '{name}': {exc}") from exc
    return registry
