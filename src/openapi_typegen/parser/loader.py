"""Load OpenAPI documents from a URL, local file, stdin, or an in-memory mapping.

This module handles all I/O for obtaining raw documents and converting them
into Python dictionaries. It supports both JSON and YAML with format
detection by file extension or response content type, and detects which
dialect (Swagger 2.0 or OpenAPI 3.x) the document is written in.

The public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`detect_version` -- Return the :class:`~openapi_typegen.models.SpecVersion`
  of a parsed document, rejecting anything else.
* :func:`load` -- Both of the above plus schema extraction, producing a
  :class:`~openapi_typegen.models.LoadResult`.
* :func:`default_resolver` -- The asynchronous HTTP fetch used for external
  ``$ref`` documents when the caller supplies no resolver of its own.
"""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

import httpx
import yaml

from openapi_typegen.exceptions import SpecLoadError
from openapi_typegen.models import LoadResult, SpecVersion
from openapi_typegen.output import debug
from openapi_typegen.parser.extractor import extract_schemas

SpecSource = Union[str, Path, Mapping[str, Any]]

_OPENAPI3_VERSION_RE = re.compile(r"^3\.\d+\.\d+")
_HTTP_TIMEOUT = 30.0


def load(source: SpecSource) -> LoadResult:
    """Load *source*, detect its dialect and extract its schema registry.

    Args:
        source: A URL (http/https), file path, ``'-'`` for stdin, or an
            already-parsed document mapping.

    Returns:
        The :class:`~openapi_typegen.models.LoadResult` for the document.

    Raises:
        SpecLoadError: If the source cannot be read or parsed, or carries
            no supported version marker.
    """
    raw = load_spec(source)
    version = detect_version(raw)
    debug(f"Loaded {version.value} document with {len(raw.get('paths') or {})} path(s)")
    return extract_schemas(raw, version)


def load_spec(source: SpecSource) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, stdin ('-') or a mapping.

    Supports JSON and YAML formats. Mappings are returned as a plain dict
    without further parsing.

    Args:
        source: A URL (http/https), file path, ``'-'`` for stdin, or a mapping.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecLoadError: If the source cannot be loaded or parsed.
    """
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, Path):
        return _load_from_file(str(source))
    if not isinstance(source, str):
        raise SpecLoadError(
            "Spec must be a URL, a file path, or a parsed mapping "
            f"(got {type(source).__name__})"
        )
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON then YAML."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecLoadError("No input received from stdin")

    return _parse_content(content, hint="")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        SpecLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=_HTTP_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    return _parse_content(response.text, hint=_hint_from_content_type(response))


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    ``.json`` files are parsed strictly as JSON, ``.yaml``/``.yml`` as YAML.
    Any other extension falls back to content-based detection.

    Args:
        path: Path to the local file.

    Returns:
        The parsed document dictionary.

    Raises:
        SpecLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecLoadError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecLoadError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _hint_from_content_type(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML. A
    'json' hint disables the fallback.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        SpecLoadError: If the content cannot be parsed, or is not an object.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecLoadError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise SpecLoadError(
                    f"Spec must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if not isinstance(result, dict):
            raise SpecLoadError(
                "Spec must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecLoadError(msg)


def detect_version(spec: Any) -> SpecVersion:
    """Detect the dialect of a parsed document.

    ``swagger: "2.0"`` selects Swagger 2.0; an ``openapi`` string matching
    ``3.<minor>.<patch>`` selects OpenAPI 3.x.

    Args:
        spec: The parsed document.

    Returns:
        The detected :class:`~openapi_typegen.models.SpecVersion`.

    Raises:
        SpecLoadError: If *spec* is not a mapping or has no supported marker.
    """
    if not isinstance(spec, Mapping):
        raise SpecLoadError("Invalid spec: not an object.")
    # Unquoted ``swagger: 2.0`` in YAML arrives as a float.
    if "swagger" in spec and str(spec["swagger"]) == "2.0":
        return SpecVersion.OPENAPI2
    openapi = spec.get("openapi")
    if isinstance(openapi, str) and _OPENAPI3_VERSION_RE.match(openapi):
        return SpecVersion.OPENAPI3
    raise SpecLoadError(
        "Invalid spec: missing or unsupported 'swagger: 2.0' or 'openapi: 3.x'."
    )


async def default_resolver(url: str) -> dict[str, Any]:
    """Fetch an external ``$ref`` document over HTTP.

    Non-success status codes and unparseable bodies raise; the resolver
    turns any such failure into a
    :class:`~openapi_typegen.exceptions.ResolutionError` for *url*.

    Args:
        url: Base document address (no fragment).

    Returns:
        The parsed document.

    Raises:
        SpecLoadError: On network errors, non-2xx responses, or bad content.
    """
    async with httpx.AsyncClient(timeout=_HTTP_TIMEOUT, follow_redirects=True) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SpecLoadError(
                f"Failed to resolve {url}: {exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.RequestError as exc:
            raise SpecLoadError(f"Failed to resolve {url}: {exc}") from exc

    hint = _hint_from_content_type(response)
    if not hint:
        hint = "yaml" if url.lower().endswith((".yaml", ".yml")) else "json"
    return _parse_content(response.text, hint=hint)
