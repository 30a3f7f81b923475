"""Name conversions between OpenAPI spellings and generated identifiers.

Every function here is pure: the same input always yields the same output,
so regenerating from an unchanged document is reproducible.
"""

from __future__ import annotations

import re

_SEPARATOR_LOWER_RE = re.compile(r"[-_]([a-z])")
_SEPARATOR_UPPER_RE = re.compile(r"[-_]([A-Z])")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_$]")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

UNKNOWN_TYPE = "unknown"


def to_camel_case(name: str) -> str:
    """Convert snake_case and kebab-case to camelCase.

    ``"user_name"`` -> ``"userName"``, ``"security-advisory"`` ->
    ``"securityAdvisory"``. Existing capitals are kept.
    """
    name = _SEPARATOR_LOWER_RE.sub(lambda m: m.group(1).upper(), name)
    return _SEPARATOR_UPPER_RE.sub(lambda m: m.group(1), name)


def to_pascal_case(name: str) -> str:
    """Convert a schema name to the canonical PascalCase type name.

    Hyphens and underscores are word boundaries; any other character that
    cannot appear in an identifier is dropped, and a leading digit is
    prefixed with an underscore.

    Example::

        to_pascal_case("security-advisory-ecosystems")  # "SecurityAdvisoryEcosystems"
        to_pascal_case("pet.v2")                         # "Petv2"
    """
    camel = _NON_IDENTIFIER_RE.sub("", to_camel_case(name))
    if not camel:
        return ""
    if camel[0].isdigit():
        camel = "_" + camel
    return camel[0].upper() + camel[1:]


def is_valid_identifier(name: str) -> bool:
    """True if *name* can be written as a bare TypeScript property name."""
    return bool(_IDENTIFIER_RE.match(name))


def slugify(text: str) -> str:
    """Convert a tag or path segment to a filename-safe slug.

    Lowercases, turns whitespace runs into hyphens, drops anything outside
    ``[a-z0-9-]`` and collapses repeated hyphens. An empty result becomes
    ``"untagged"``.
    """
    slug = text.lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    return slug or "untagged"


def ref_to_type_name(ref: str) -> str:
    """Map a ``$ref`` pointer to the canonical type name it denotes.

    * ``#/definitions/Foo`` and ``#/components/schemas/Foo`` -> ``Foo``
    * any other local pointer -> its last segment
    * ``https://host/doc.json#/path/Foo`` -> ``Foo``

    Returns :data:`UNKNOWN_TYPE` for pointers that name no schema (relative
    file references, or a URL without a fragment).
    """
    if ref.startswith(("http://", "https://")):
        _, sep, fragment = ref.partition("#/")
        if not sep or not fragment:
            return UNKNOWN_TYPE
        return to_pascal_case(_unescape(fragment.rsplit("/", 1)[-1])) or UNKNOWN_TYPE
    for prefix in ("#/definitions/", "#/components/schemas/"):
        if ref.startswith(prefix):
            name = ref[len(prefix):].split("/")[0]
            return to_pascal_case(_unescape(name)) or UNKNOWN_TYPE
    if ref.startswith("#/"):
        last = ref[2:].split("/")[-1]
        return to_pascal_case(_unescape(last)) or "Unknown"
    return UNKNOWN_TYPE


def _unescape(segment: str) -> str:
    """Undo RFC 6901 JSON Pointer escaping (``~1`` -> ``/``, ``~0`` -> ``~``)."""
    return segment.replace("~1", "/").replace("~0", "~")
