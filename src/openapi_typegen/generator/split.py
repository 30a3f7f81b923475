"""Partition the type registry into output files and write them.

Splitting happens in three steps, each a separate function so it can be
inspected and tested on its own:

1. :func:`assign_schema_to_group` -- every type gets the group of the
   operations that use it (tag or path segment), or the shared group when
   those operations disagree or no operation uses it.
2. :func:`reconcile_groups` -- a type that a type in some other group
   depends on is moved to the shared group, so no group file has to import
   from a sibling group for a type it does not own.
3. :func:`emit_split_files` -- one ``<group>.ts`` file per group with its
   types in dependency-first order and ``import type`` lines for
   cross-group references, then an ``index.ts`` that re-exports every type
   exactly once.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from openapi_typegen.files import write_text_file
from openapi_typegen.generator.emitter import generate_interface, resolve_header
from openapi_typegen.generator.graph import build_dependency_graph, topo_sort
from openapi_typegen.models import (
    DependencyGraph,
    GenerateOptions,
    GroupAssignment,
    LogLevel,
    OperationRefs,
    ResolvedSchemaMap,
    SplitStrategy,
)
from openapi_typegen.naming import slugify
from openapi_typegen.output import debug, warning

SHARED_GROUP = "common"
"""Group for types with no single owning tag or path segment."""

INDEX_NAME = "index"
SOURCE_EXTENSION = ".ts"

_VERSION_SEGMENT_RE = re.compile(r"^v\d+$", re.IGNORECASE)


def get_path_segment(path: str) -> str:
    """Return the path segment used to group an operation by path.

    The first segment, unless it is a version marker (``v1``, ``V2``) or the
    literal ``api``, in which case the second. ``"root"`` for ``/``.

    Example::

        get_path_segment("/v2/usercollection/sleep")  # "usercollection"
        get_path_segment("/pets/{id}")                # "pets"
    """
    segments = [s for s in path.strip("/").split("/") if s]
    if not segments:
        return "root"
    first = segments[0]
    if _VERSION_SEGMENT_RE.match(first) or first == "api":
        return segments[1] if len(segments) > 1 else first
    return first


def group_slug(text: str) -> str:
    """Slugify a tag or path segment into a group name.

    ``index`` is reserved for the re-export file, so a group that would be
    called that is renamed to ``index-types``.
    """
    slug = slugify(text)
    if slug == INDEX_NAME:
        return f"{INDEX_NAME}-types"
    return slug


def operation_group(operation: OperationRefs, strategy: SplitStrategy) -> str:
    """The group an operation's types belong to under *strategy*."""
    if strategy == SplitStrategy.TAG:
        if len(operation.tags) == 1:
            return group_slug(operation.tags[0])
        return SHARED_GROUP
    return group_slug(get_path_segment(operation.path))


def assign_schema_to_group(
    operations: Iterable[OperationRefs],
    type_names: Iterable[str],
    strategy: SplitStrategy,
) -> GroupAssignment:
    """Assign every type name to an output group.

    A type used only by operations that agree on one group goes to that
    group. A type used by operations in different groups, or by none, goes
    to :data:`SHARED_GROUP`. Names referenced by operations but absent from
    *type_names* are ignored.

    Returns:
        Type name -> group slug, in *type_names* order.
    """
    names = list(type_names)
    known = set(names)
    groups_by_type: dict[str, set[str]] = {}
    for op in operations:
        group = operation_group(op, strategy)
        for ref in op.refs:
            if ref in known:
                groups_by_type.setdefault(ref, set()).add(group)

    assignment: GroupAssignment = {}
    for name in names:
        groups = groups_by_type.get(name)
        if groups and len(groups) == 1:
            assignment[name] = next(iter(groups))
        else:
            assignment[name] = SHARED_GROUP
    return assignment


def reverse_dependencies(dependency_graph: DependencyGraph) -> dict[str, set[str]]:
    """Type name -> names of the types that reference it."""
    reverse: dict[str, set[str]] = {}
    for user, deps in dependency_graph.items():
        for dep in deps:
            reverse.setdefault(dep, set()).add(user)
    return reverse


def reconcile_groups(
    assignment: GroupAssignment,
    dependency_graph: DependencyGraph,
) -> GroupAssignment:
    """Move types depended on from another group into the shared group.

    This is a single pass over *assignment* in its order, not a fixed-point
    iteration. A promotion is visible to the checks that come after it in
    the same pass, but a type checked before one of its dependents was
    promoted is not revisited. For a chain ``A -> B -> C`` where B and C
    share a group and C is checked before B is promoted, C stays in that
    group while B moves to the shared group.

    Args:
        assignment: Output of :func:`assign_schema_to_group`. Not modified.
        dependency_graph: Output of
            :func:`~openapi_typegen.generator.graph.build_dependency_graph`.

    Returns:
        A new assignment.
    """
    reconciled = dict(assignment)
    dependents = reverse_dependencies(dependency_graph)
    for type_name in assignment:
        group = reconciled[type_name]
        if group == SHARED_GROUP:
            continue
        for user in sorted(dependents.get(type_name, ())):
            user_group = reconciled.get(user)
            if user_group is not None and user_group != group:
                debug(f"Moving {type_name} from {group} to {SHARED_GROUP} (used by {user} in {user_group})")
                reconciled[type_name] = SHARED_GROUP
                break
    return reconciled


def group_types(assignment: GroupAssignment) -> dict[str, list[str]]:
    """Group slug -> its type names, sorted by name; groups in first-seen order."""
    groups: dict[str, list[str]] = {}
    for type_name, group in assignment.items():
        groups.setdefault(group, []).append(type_name)
    for names in groups.values():
        names.sort()
    return groups


def ordered_groups(groups: Iterable[str]) -> list[str]:
    """Shared group first, then the rest alphabetically."""
    return sorted(set(groups), key=lambda g: (g != SHARED_GROUP, g))


def group_filename(group: str) -> str:
    return f"{group}{SOURCE_EXTENSION}"


def cross_group_imports(
    type_names: list[str],
    group: str,
    assignment: GroupAssignment,
    dependency_graph: DependencyGraph,
) -> dict[str, list[str]]:
    """Owning group -> types this group references but does not declare."""
    local = set(type_names)
    imports: dict[str, set[str]] = {}
    for name in type_names:
        for dep in dependency_graph.get(name, ()):
            if dep in local:
                continue
            owner = assignment.get(dep)
            if owner is not None and owner != group:
                imports.setdefault(owner, set()).add(dep)
    return {owner: sorted(imports[owner]) for owner in ordered_groups(imports)}


def build_index(
    group_exports: Iterable[tuple[str, list[str]]],
    header: Optional[str] = None,
    log_level: LogLevel = LogLevel.BASIC,
) -> str:
    """Render the index file re-exporting each type name exactly once.

    *group_exports* is visited in the order given; a name already exported
    by an earlier group is skipped and reported as a duplicate owner. The
    summary warning is itemised per type in verbose mode.

    Returns:
        The index file content.
    """
    exported_from: dict[str, str] = {}
    duplicates: list[tuple[str, str, str]] = []
    export_lines: list[str] = []

    for group, names in group_exports:
        to_export: list[str] = []
        for name in names:
            first = exported_from.get(name)
            if first is None:
                exported_from[name] = group
                to_export.append(name)
            else:
                duplicates.append((name, first, group))
        if to_export:
            export_lines.append(
                f'export type {{ {", ".join(to_export)} }} from "./{group_filename(group)}";'
            )

    if duplicates:
        summary = (
            f"{len(duplicates)} type(s) are emitted in more than one file; index re-exports "
            "each once. Fix assignment so each type lives in a single file."
        )
        if log_level == LogLevel.VERBOSE:
            detail = "\n".join(
                f"  {name} (in {group_filename(first)} and {group_filename(also)})"
                for name, first, also in duplicates
            )
            warning(f"{summary}\n{detail}")
        else:
            warning(summary)

    parts = []
    if header is not None:
        parts.append(header + "\n")
    parts.append("\n".join(export_lines))
    return "\n".join(parts).rstrip() + "\n"


def render_group_file(
    type_names: list[str],
    group: str,
    registry: ResolvedSchemaMap,
    assignment: GroupAssignment,
    dependency_graph: DependencyGraph,
    options: GenerateOptions,
    header: Optional[str] = None,
) -> str:
    """Render one group's source file: header, imports, then declarations."""
    indent_unit = options.indent.unit
    lines: list[str] = []
    if header is not None:
        lines.append(header)
        lines.append("")

    imports = cross_group_imports(type_names, group, assignment, dependency_graph)
    if imports:
        lines.append(
            "\n".join(
                f'import type {{ {", ".join(names)} }} from "./{group_filename(owner)}";'
                for owner, names in imports.items()
            )
        )
        lines.append("")

    for name in type_names:
        lines.append(generate_interface(name, registry[name], registry, options, indent_unit))
        lines.append("")

    content = re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).rstrip()
    return content + "\n"


def emit_split_files(
    registry: ResolvedSchemaMap,
    assignment: GroupAssignment,
    options: GenerateOptions,
    output_dir: str | Path,
    dependency_graph: Optional[DependencyGraph] = None,
) -> str:
    """Write one file per group plus ``index.ts`` and return the index content.

    *assignment* is expected to be reconciled already (see
    :func:`reconcile_groups`). Files are written one after another; if a
    later write fails, earlier files stay on disk.

    Args:
        registry: The resolved type registry.
        assignment: Type name -> group slug.
        options: Emission options (indent, naming, header, hints, log level).
        output_dir: Directory to write into; created if missing.
        dependency_graph: Precomputed graph for *registry*; built when omitted.

    Returns:
        The content written to ``index.ts``.

    Raises:
        OutputWriteError: If a file cannot be written.
    """
    out_dir = Path(output_dir)
    graph = dependency_graph if dependency_graph is not None else build_dependency_graph(registry)
    header = resolve_header(options)

    emitted: dict[str, list[str]] = {}
    for group, names in group_types(assignment).items():
        ordered = topo_sort(names, graph)
        content = render_group_file(ordered, group, registry, assignment, graph, options, header)
        write_text_file(out_dir / group_filename(group), content)
        debug(f"Wrote {group_filename(group)} ({len(ordered)} type(s))")
        emitted[group] = ordered

    index_content = build_index(
        ((group, emitted[group]) for group in ordered_groups(emitted)),
        header=header,
        log_level=options.log_level,
    )
    write_text_file(out_dir / group_filename(INDEX_NAME), index_content)
    return index_content
