"""Type dependency graph and dependency-first ordering.

The graph is one level deep: each type maps to the registry types its own
schema mentions, not to what those mention in turn. It is built once per
generation request, after resolution, and only read afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from openapi_typegen.models import DependencyGraph, ResolvedSchemaMap, SchemaNode
from openapi_typegen.naming import UNKNOWN_TYPE, ref_to_type_name


def collect_schema_refs(schema: SchemaNode, registry: Mapping[str, SchemaNode]) -> set[str]:
    """Return the registry type names *schema* references.

    Follows ``$ref``, ``allOf``/``oneOf``/``anyOf``, ``items``,
    ``properties`` and a schema-valued ``additionalProperties``, without
    entering the referenced types. Names absent from *registry* are dropped.
    """
    found: set[str] = set()
    stack = [schema]
    while stack:
        node = stack.pop()
        if node.ref:
            name = ref_to_type_name(node.ref)
            if name != UNKNOWN_TYPE and name in registry:
                found.add(name)
        for members in (node.all_of, node.one_of, node.any_of):
            if members:
                stack.extend(members)
        if node.items is not None:
            stack.append(node.items)
        if node.properties:
            stack.extend(node.properties.values())
        extra = node.additional_properties
        if extra is not None:
            stack.append(extra)
    return found


def build_dependency_graph(registry: ResolvedSchemaMap) -> DependencyGraph:
    """Map every type in *registry* to the set of registry types it references."""
    return {name: collect_schema_refs(schema, registry) for name, schema in registry.items()}


def topo_sort(type_names: Iterable[str], deps: Mapping[str, set[str]]) -> list[str]:
    """Order *type_names* so each type follows the types it depends on.

    Only names in *type_names* are considered: dependencies outside that set
    are skipped entirely. Dependencies are walked in sorted order with an
    explicit stack, so long chains do not hit the recursion limit. A node
    reached again while it is still on the stack counts as satisfied, so
    cycles are broken where they are first closed instead of raising.
    """
    wanted = list(type_names)
    members = set(wanted)
    order: list[str] = []
    visited: set[str] = set()
    visiting: set[str] = set()

    for root in wanted:
        if root in visited:
            continue
        visiting.add(root)
        stack = [(root, iter(sorted(deps.get(root, ()))))]
        while stack:
            name, pending = stack[-1]
            for dep in pending:
                if dep in members and dep not in visited and dep not in visiting:
                    visiting.add(dep)
                    stack.append((dep, iter(sorted(deps.get(dep, ())))))
                    break
            else:
                stack.pop()
                visiting.discard(name)
                visited.add(name)
                order.append(name)
    return order
