"""OpenAPI document parser -- load, extract, resolve, and index.

This sub-package is responsible for the first half of the openapi-typegen
pipeline: turning a raw Swagger 2.0 / OpenAPI 3.x document (JSON or YAML,
local file, remote URL, or in-memory mapping) into a resolved type registry
and an operation index that the generator can consume.

Typical usage::

    import asyncio

    from openapi_typegen.parser import collect_refs_from_paths, load, resolve
    from openapi_typegen.parser.loader import default_resolver

    loaded = load("https://petstore.swagger.io/v2/swagger.json")
    registry = asyncio.run(resolve(loaded, default_resolver))
    operations = collect_refs_from_paths(loaded.spec, loaded.version)

Sub-modules:

* :mod:`~openapi_typegen.parser.loader` -- I/O layer (URL, file, stdin),
  format detection, dialect detection, and the default external resolver.
* :mod:`~openapi_typegen.parser.refs` -- ``$ref`` collection and pointer
  helpers.
* :mod:`~openapi_typegen.parser.extractor` -- Schema registry extraction
  for loaded and fetched documents.
* :mod:`~openapi_typegen.parser.resolver` -- Registry normalisation and the
  external document worklist.
* :mod:`~openapi_typegen.parser.paths` -- Per-operation type index and
  endpoint hints.
"""

from openapi_typegen.parser.extractor import extract_schemas
from openapi_typegen.parser.loader import default_resolver, detect_version, load, load_spec
from openapi_typegen.parser.paths import build_endpoint_hints, collect_refs_from_paths
from openapi_typegen.parser.refs import collect_refs
from openapi_typegen.parser.resolver import resolve

__all__ = [
    "build_endpoint_hints",
    "collect_refs",
    "collect_refs_from_paths",
    "default_resolver",
    "detect_version",
    "extract_schemas",
    "load",
    "load_spec",
    "resolve",
]
