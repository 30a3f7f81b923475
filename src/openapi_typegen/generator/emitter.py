"""Render resolved schemas as TypeScript declarations.

Each registry entry becomes one exported declaration:

* object schemas -> ``export interface Name { ... }``
* ``allOf`` with ``$ref`` members -> ``export interface Name extends A, B { ... }``
* arrays -> ``export type Name = Item[];``
* enums -> a union of literal types
* ``$ref`` aliases, ``oneOf``/``anyOf`` and primitives -> ``export type Name = ...;``
* schemas without properties -> ``export type Name = Record<string, unknown>;``

Local ``$ref`` pointers are turned into type names here, by name lookup in
the registry, rather than being expanded during resolution.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from openapi_typegen.models import (
    GenerateOptions,
    PropertyNaming,
    ResolvedSchemaMap,
    SchemaNode,
)
from openapi_typegen.naming import is_valid_identifier, ref_to_type_name, to_camel_case

TOOL_NAME = "openapi-typegen"

_PRIMITIVES = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "file": "File | Blob",
    "null": "null",
}


def schema_to_ts(schema: SchemaNode, registry: Mapping[str, SchemaNode]) -> str:
    """Convert a schema node to a TypeScript type expression (``"string"``, ``"Foo[]"``, ``"A | B"``)."""
    ts = _schema_to_ts(schema, registry)
    if schema.nullable and ts != "null" and not ts.endswith("| null"):
        ts = f"{ts} | null"
    return ts


def _schema_to_ts(schema: SchemaNode, registry: Mapping[str, SchemaNode]) -> str:
    if schema.ref:
        return ref_to_type_name(schema.ref)
    if schema.all_of:
        return " & ".join(_group(schema_to_ts(s, registry)) for s in schema.all_of)
    if schema.one_of:
        return " | ".join(schema_to_ts(s, registry) for s in schema.one_of)
    if schema.any_of:
        return " | ".join(schema_to_ts(s, registry) for s in schema.any_of)
    if schema.enum:
        return " | ".join(_literal(v) for v in schema.enum)
    if isinstance(schema.type, list):
        return " | ".join(_primitive_or_object(t, schema, registry) for t in schema.type)
    return _primitive_or_object(schema.type, schema, registry)


def _primitive_or_object(
    type_name: Optional[str],
    schema: SchemaNode,
    registry: Mapping[str, SchemaNode],
) -> str:
    if type_name == "array":
        if schema.items is None:
            return "unknown[]"
        return f"{_group(schema_to_ts(schema.items, registry))}[]"
    if type_name == "object" or (type_name is None and schema.properties):
        extra = schema.additional_properties
        if not schema.properties and extra is not None:
            return f"Record<string, {schema_to_ts(extra, registry)}>"
        return "object"
    return _PRIMITIVES.get(type_name or "", "unknown")


def _group(ts: str) -> str:
    """Parenthesise a union so it can be used in ``[]`` or ``&`` positions."""
    return f"({ts})" if " | " in ts else ts


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value), ensure_ascii=False)


def format_doc_comment(text: str, indent: str) -> str:
    """Format *text* as a JSDoc block, single-line when it fits on one line."""
    safe = str(text).replace("*/", "* /")
    parts = re.split(r"\r?\n", safe)
    if len(parts) <= 1:
        return f"{indent}/** {safe} */"
    lines = [f"{indent}/**"]
    lines.extend(f"{indent} * {line}".rstrip() for line in parts)
    lines.append(f"{indent} */")
    return "\n".join(lines)


def _with_format(text: Optional[str], fmt: Optional[str]) -> Optional[str]:
    if not fmt:
        return text
    return f"{text}\n\nFormat: {fmt}" if text else f"Format: {fmt}"


def _property_key(key: str, naming: PropertyNaming) -> str:
    name = to_camel_case(key) if naming == PropertyNaming.CAMEL else key
    if is_valid_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def generate_properties(
    properties: Mapping[str, SchemaNode],
    required: list[str],
    registry: Mapping[str, SchemaNode],
    naming: PropertyNaming,
    indent: str,
    indent_unit: str,
) -> list[str]:
    """Emit one member line (plus optional doc comment) per property.

    Inline object schemas with properties are expanded as nested object
    literals at one further indent level.
    """
    lines: list[str] = []
    for key, prop in properties.items():
        optional = "" if key in required else "?"
        comment = prop.description or prop.title
        if not comment and prop.ref:
            ref_name = ref_to_type_name(prop.ref)
            referenced = registry.get(ref_name)
            comment = (referenced.description or referenced.title if referenced else None) or ref_name
        comment = _with_format(comment, prop.format)
        if comment:
            lines.append(format_doc_comment(comment, indent))

        prop_key = _property_key(key, naming)
        ts = schema_to_ts(prop, registry)
        if ts.startswith("object") and prop.properties:
            lines.append(f"{indent}{prop_key}{optional}: {{")
            lines.extend(
                generate_properties(
                    prop.properties,
                    prop.required or [],
                    registry,
                    naming,
                    indent + indent_unit,
                    indent_unit,
                )
            )
            suffix = " | null" if prop.nullable else ""
            lines.append(f"{indent}}}{suffix};")
        else:
            lines.append(f"{indent}{prop_key}{optional}: {ts};")
    return lines


def generate_interface(
    name: str,
    schema: SchemaNode,
    registry: ResolvedSchemaMap,
    options: GenerateOptions,
    indent_unit: str,
) -> str:
    """Emit a single exported declaration for *name*.

    The doc comment carries the schema's description (or title, or the
    name), an optional ``Format:`` note, and the ``Used by:`` endpoint list
    when ``options.endpoint_hints`` names this type.
    """
    comment = _with_format(schema.description or schema.title or name, schema.format)
    hints = (options.endpoint_hints or {}).get(name)
    if hints:
        used_by = "Used by:\n" + "\n".join(f" - {hint}" for hint in hints)
        comment = f"{comment}\n\n{used_by}" if comment else used_by

    lines: list[str] = []
    if comment:
        lines.append(format_doc_comment(comment, ""))
    naming = options.property_naming

    if schema.ref or schema.one_of or schema.any_of:
        lines.append(f"export type {name} = {schema_to_ts(schema, registry)};")
        return "\n".join(lines)

    if schema.type == "array":
        lines.append(f"export type {name} = {schema_to_ts(schema, registry)};")
        return "\n".join(lines)

    if schema.all_of:
        bases = [ref_to_type_name(member.ref) for member in schema.all_of if member.ref]
        properties: dict[str, SchemaNode] = dict(schema.properties or {})
        required: list[str] = list(schema.required or [])
        for member in schema.all_of:
            if member.ref:
                continue
            properties.update(member.properties or {})
            required.extend(member.required or [])
        extends = f" extends {', '.join(bases)}" if bases else ""
        lines.append(f"export interface {name}{extends} {{")
        lines.extend(
            generate_properties(properties, required, registry, naming, indent_unit, indent_unit)
        )
        lines.append("}")
        return "\n".join(lines)

    if schema.enum:
        lines.append(f"export type {name} = {schema_to_ts(schema, registry)};")
        return "\n".join(lines)

    if not schema.properties:
        if (isinstance(schema.type, str) and schema.type in _PRIMITIVES) or isinstance(schema.type, list):
            target = schema_to_ts(schema, registry)
        elif schema.additional_properties is not None:
            target = schema_to_ts(schema, registry)
        else:
            target = "Record<string, unknown>"
        lines.append(f"export type {name} = {target};")
        return "\n".join(lines)

    lines.append(f"export interface {name} {{")
    lines.extend(
        generate_properties(
            schema.properties, schema.required or [], registry, naming, indent_unit, indent_unit
        )
    )
    lines.append("}")
    return "\n".join(lines)


def build_default_header(options: GenerateOptions) -> str:
    """Build the default file header: tool, timestamp, optional source, do-not-edit."""
    generated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
    lines = [
        f" * Auto-generated TypeScript types with {TOOL_NAME}",
        f" * Generated at: {generated_at}",
    ]
    if options.source_label:
        lines.append(f" * Source file: {options.source_label}")
    lines.append(" * DO NOT EDIT THIS FILE MANUALLY")
    return "/**\n" + "\n".join(lines) + "\n */"


def resolve_header(options: GenerateOptions) -> Optional[str]:
    """The header block to emit, or ``None`` when headers are disabled."""
    if not options.include_header:
        return None
    if options.header_comment is not None:
        return options.header_comment
    return build_default_header(options)


def generate(registry: ResolvedSchemaMap, options: Optional[GenerateOptions] = None) -> str:
    """Generate TypeScript source for every type in *registry*, in registry order.

    Does not load, resolve, or write anything.

    Args:
        registry: Output of :func:`~openapi_typegen.parser.resolver.resolve`.
        options: Indentation, property naming, header and endpoint hint settings.

    Returns:
        The generated source.
    """
    options = options or GenerateOptions()
    indent_unit = options.indent.unit
    out: list[str] = []

    header = resolve_header(options)
    if header is not None:
        out.append(header)
        out.append("")

    for type_name, schema in registry.items():
        out.append(generate_interface(type_name, schema, registry, options, indent_unit))
        out.append("")

    return "\n".join(out)
