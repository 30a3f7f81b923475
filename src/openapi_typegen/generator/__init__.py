"""Type generator -- turn a resolved registry into TypeScript source.

This sub-package is the second half of the openapi-typegen pipeline. It takes
the :data:`~openapi_typegen.models.ResolvedSchemaMap` produced by the parser
and renders it either as one source string or as a directory of per-group
files with an index.

Typical usage::

    from openapi_typegen.generator import generate
    from openapi_typegen.models import GenerateOptions

    source = generate(registry, GenerateOptions(include_header=False))

Sub-modules:

* :mod:`~openapi_typegen.generator.graph` -- One-level type dependency
  graph and cycle-tolerant dependency-first ordering.
* :mod:`~openapi_typegen.generator.emitter` -- Declarations, doc comments
  and file headers.
* :mod:`~openapi_typegen.generator.split` -- Group assignment,
  reconciliation, and multi-file emission.
"""

from openapi_typegen.generator.emitter import generate
from openapi_typegen.generator.graph import build_dependency_graph, topo_sort
from openapi_typegen.generator.split import (
    SHARED_GROUP,
    assign_schema_to_group,
    emit_split_files,
    reconcile_groups,
)

__all__ = [
    "SHARED_GROUP",
    "assign_schema_to_group",
    "build_dependency_graph",
    "emit_split_files",
    "generate",
    "reconcile_groups",
    "topo_sort",
]
