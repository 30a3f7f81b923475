"""Inspect commands -- examine what generation would produce.

Provides the ``openapi-typegen inspect`` sub-command group with read-only
commands: the resolved types and their dependencies, the reconciled group
assignment for a split strategy, and the operation index. Each command
loads and resolves the document (fetching external references) but never
writes files.
"""

from __future__ import annotations

import asyncio

import typer

from openapi_typegen.exceptions import TypegenError
from openapi_typegen.models import (
    GenerateOptions,
    LoadResult,
    OperationRefs,
    ResolvedSchemaMap,
    SchemaNode,
    SplitStrategy,
)
from openapi_typegen.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load(spec: str) -> tuple[LoadResult, ResolvedSchemaMap, list[OperationRefs]]:
    """Load and resolve *spec*, exiting with the error's code on failure."""
    from openapi_typegen.generate import load_and_resolve

    try:
        return asyncio.run(load_and_resolve(spec, GenerateOptions()))
    except TypegenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _schema_kind(schema: SchemaNode) -> str:
    if schema.ref:
        return "alias"
    if schema.all_of:
        return "allOf"
    if schema.one_of:
        return "oneOf"
    if schema.any_of:
        return "anyOf"
    if schema.enum:
        return "enum"
    if isinstance(schema.type, list):
        return "|".join(schema.type)
    return schema.type or ("object" if schema.properties else "-")


@inspect_app.command("schemas")
def inspect_schemas(
    spec: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
) -> None:
    """List resolved types with their kind and direct dependencies.

    Example::

        openapi-typegen inspect schemas openapi.yaml
    """
    from openapi_typegen.generator.graph import build_dependency_graph

    _, registry, _ = _load(spec)
    if not registry:
        info("No schemas defined in this document.")
        return

    graph = build_dependency_graph(registry)
    rows = [
        [name, _schema_kind(schema), ", ".join(sorted(graph.get(name, ()))) or "-"]
        for name, schema in registry.items()
    ]
    get_output().print_table(["Type", "Kind", "Depends on"], rows, title=f"Types ({len(rows)})")


@inspect_app.command("groups")
def inspect_groups(
    spec: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    split: SplitStrategy = typer.Option(
        SplitStrategy.TAG, "--split", case_sensitive=False, help="Grouping strategy."
    ),
) -> None:
    """Show which output file each type would be written to.

    The assignment shown is the reconciled one, so types moved to the
    shared group because of cross-group dependencies appear there.

    Example::

        openapi-typegen inspect groups openapi.yaml --split path
    """
    from openapi_typegen.generator.graph import build_dependency_graph
    from openapi_typegen.generator.split import (
        assign_schema_to_group,
        group_filename,
        reconcile_groups,
    )

    _, registry, operations = _load(spec)
    if not registry:
        info("No schemas defined in this document.")
        return

    initial = assign_schema_to_group(operations, registry, split)
    reconciled = reconcile_groups(initial, build_dependency_graph(registry))

    rows: list[list[str]] = []
    for name, group in reconciled.items():
        moved = f"moved from {initial[name]}" if initial[name] != group else ""
        rows.append([name, group_filename(group), moved])
    get_output().print_table(
        ["Type", "File", "Note"], rows, title=f"Groups by {split.value} ({len(rows)})"
    )


@inspect_app.command("operations")
def inspect_operations(
    spec: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
) -> None:
    """List operations with their tags and the types they reference.

    Example::

        openapi-typegen inspect operations openapi.yaml
    """
    _, _, operations = _load(spec)
    if not operations:
        info("No operations defined in this document.")
        return

    rows = [
        [
            op.method.upper(),
            op.path,
            ", ".join(op.tags) or "-",
            ", ".join(op.refs) or "-",
        ]
        for op in operations
    ]
    get_output().print_table(
        ["Method", "Path", "Tags", "Types"], rows, title=f"Operations ({len(rows)})"
    )
