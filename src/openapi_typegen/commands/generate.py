"""Generate command -- write TypeScript declarations for an OpenAPI document.

``openapi-typegen generate SPEC`` prints the declarations to stdout.
With ``-o FILE`` they are written to that file instead; with ``--split`` and
``-o DIR`` one file per group plus ``index.ts`` is written to ``DIR``.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import typer

from openapi_typegen.exceptions import TypegenError
from openapi_typegen.models import IndentConfig, LogLevel, PropertyNaming, SplitStrategy
from openapi_typegen.output import error, print_data, success


def _cli_overrides(
    ctx: typer.Context,
    output: Optional[str],
    split: Optional[SplitStrategy],
    property_naming: Optional[PropertyNaming],
    tabs: bool,
    indent_width: Optional[int],
    no_header: bool,
    header_comment: Optional[str],
    no_endpoint_hints: bool,
) -> dict[str, Any]:
    """Collect the flags the user actually passed; ``None`` means "not given"."""
    overrides: dict[str, Any] = {
        "output": output,
        "split": split,
        "property_naming": property_naming,
        "header_comment": header_comment,
    }
    if tabs or indent_width is not None:
        overrides["indent"] = IndentConfig(
            use_tabs=tabs, width=indent_width if indent_width is not None else 4
        )
    if no_header:
        overrides["include_header"] = False
    if no_endpoint_hints:
        overrides["include_endpoint_hints"] = False
    if ctx.obj and ctx.obj.get("verbose"):
        overrides["log_level"] = LogLevel.VERBOSE
    return overrides


def generate_command(
    ctx: typer.Context,
    spec: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file, or directory with --split."
    ),
    split: Optional[SplitStrategy] = typer.Option(
        None, "--split", case_sensitive=False, help="Split output into one file per tag or path."
    ),
    property_naming: Optional[PropertyNaming] = typer.Option(
        None, "--property-naming", case_sensitive=False, help="Property name style."
    ),
    tabs: bool = typer.Option(False, "--tabs", help="Indent with tabs."),
    indent_width: Optional[int] = typer.Option(
        None, "--indent-width", min=0, help="Spaces per indent level (default 4)."
    ),
    no_header: bool = typer.Option(False, "--no-header", help="Omit the file header."),
    header_comment: Optional[str] = typer.Option(
        None, "--header-comment", help="Literal header block to use instead of the default."
    ),
    no_endpoint_hints: bool = typer.Option(
        False, "--no-endpoint-hints", help="Omit 'Used by' endpoint lists from doc comments."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Project config file (default ./openapi-typegen.json)."
    ),
) -> None:
    """Generate TypeScript types from an OpenAPI document.

    Example::

        openapi-typegen generate openapi.yaml -o src/api-types.ts
        openapi-typegen generate https://petstore.swagger.io/v2/swagger.json --split tag -o src/types
    """
    from openapi_typegen.config import resolve_options
    from openapi_typegen.generate import generate_types

    overrides = _cli_overrides(
        ctx,
        output,
        split,
        property_naming,
        tabs,
        indent_width,
        no_header,
        header_comment,
        no_endpoint_hints,
    )

    try:
        options = resolve_options(overrides, config)
        result = asyncio.run(generate_types(spec, options))
    except TypegenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if options.split is not None:
        success(f"Wrote split output to {options.output}")
    elif options.output:
        success(f"Wrote {options.output}")
    else:
        print_data(result)

