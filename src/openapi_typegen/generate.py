"""End-to-end generation: load, resolve, index, and emit.

:func:`generate_types` is the library entry point the CLI calls. One call is
one request; nothing is shared between calls. The request moves through the
stages of :class:`~openapi_typegen.models.GenerationStage`, each logged at
debug level.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

from openapi_typegen.exceptions import ConfigError
from openapi_typegen.files import write_text_file
from openapi_typegen.generator.emitter import generate
from openapi_typegen.generator.graph import build_dependency_graph
from openapi_typegen.generator.split import (
    assign_schema_to_group,
    emit_split_files,
    group_types,
    reconcile_groups,
)
from openapi_typegen.models import (
    GenerateOptions,
    GenerationStage,
    LoadResult,
    OperationRefs,
    ResolvedSchemaMap,
)
from openapi_typegen.output import debug
from openapi_typegen.parser.loader import SpecSource, default_resolver, load
from openapi_typegen.parser.paths import build_endpoint_hints, collect_refs_from_paths
from openapi_typegen.parser.resolver import resolve


def _stage(stage: GenerationStage, detail: str = "") -> None:
    debug(f"Stage {stage.value}: {detail}".rstrip(": "))


def _default_source_label(spec: SpecSource) -> Optional[str]:
    if isinstance(spec, Path):
        return str(spec)
    if isinstance(spec, str) and spec != "-":
        return spec
    return None


async def load_and_resolve(
    spec: SpecSource,
    options: GenerateOptions,
) -> tuple[LoadResult, ResolvedSchemaMap, list[OperationRefs]]:
    """Run the loading half of the pipeline.

    Returns the load result, the resolved registry and the operation index.
    Used by :func:`generate_types` and by the ``inspect`` commands.
    """
    loaded = await asyncio.to_thread(load, spec)
    _stage(GenerationStage.LOADED, f"{len(loaded.registry)} local schema(s)")

    registry = await resolve(loaded, options.resolver or default_resolver)
    _stage(GenerationStage.RESOLVED, f"{len(registry)} type(s)")

    operations = collect_refs_from_paths(loaded.spec, loaded.version)
    _stage(GenerationStage.INDEXED, f"{len(operations)} operation(s)")
    return loaded, registry, operations


async def generate_types(
    spec: SpecSource,
    options: Optional[GenerateOptions] = None,
) -> str:
    """Generate TypeScript declarations for the document at *spec*.

    Args:
        spec: A file path, URL, ``'-'`` for stdin, or a parsed document.
        options: Generation options. ``options.output`` is a file in
            single-file mode and a directory when ``options.split`` is set.

    Returns:
        The generated source in single-file mode, or the content of
        ``index.ts`` in split mode.

    Raises:
        ConfigError: If ``split`` is set without ``output``. Raised before
            anything is loaded, fetched or written.
        SpecLoadError: If the document cannot be loaded.
        ResolutionError: If an external document cannot be fetched.
        OutputWriteError: If an output file cannot be written.
    """
    opts = options or GenerateOptions()
    if opts.split is not None and not opts.output:
        raise ConfigError(
            "Split output requires an output directory. Pass an output path "
            "(-o DIR) when using --split."
        )

    updates: dict[str, Any] = {}
    if opts.source_label is None:
        label = _default_source_label(spec)
        if label is not None:
            updates["source_label"] = label

    loaded, registry, operations = await load_and_resolve(spec, opts)

    if opts.include_endpoint_hints and opts.endpoint_hints is None:
        updates["endpoint_hints"] = build_endpoint_hints(operations, registry)
    if updates:
        opts = opts.model_copy(update=updates)

    if opts.split is not None:
        graph = build_dependency_graph(registry)
        assignment = assign_schema_to_group(operations, registry, opts.split)
        _stage(GenerationStage.ASSIGNED, f"{len(set(assignment.values()))} group(s)")

        reconciled = reconcile_groups(assignment, graph)
        for group, names in group_types(reconciled).items():
            debug(f"Group {group}: {len(names)} type(s)")
        _stage(GenerationStage.RECONCILED)

        index_content = emit_split_files(registry, reconciled, opts, opts.output, graph)
        _stage(GenerationStage.EMITTED, f"index written to {opts.output}")
        return index_content

    source = generate(registry, opts)
    if opts.output:
        write_text_file(opts.output, source)
        _stage(GenerationStage.EMITTED, f"written to {opts.output}")
    else:
        _stage(GenerationStage.EMITTED)
    return source


def generate_types_sync(
    spec: SpecSource,
    options: Optional[GenerateOptions] = None,
) -> str:
    """Blocking wrapper around :func:`generate_types` for synchronous callers."""
    return asyncio.run(generate_types(spec, options))


__all__ = ["generate_types", "generate_types_sync", "load_and_resolve"]
