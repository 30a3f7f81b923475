"""openapi-typegen -- Generate TypeScript types from Swagger 2.0 / OpenAPI 3.x documents.

This package loads an OpenAPI document (file, URL, stdin, or an in-memory
mapping), resolves its local and external ``$ref`` pointers into a flat type
registry, and emits TypeScript declarations, either as one file or split
into one file per API tag or path segment with an ``index.ts``.

Typical workflow::

    openapi-typegen generate openapi.yaml -o src/api-types.ts
    openapi-typegen generate openapi.yaml --split tag -o src/types

Or from Python::

    import asyncio
    from openapi_typegen.generate import generate_types

    source = asyncio.run(generate_types("openapi.yaml"))

Modules:
    app: Typer application and CLI entry point.
    generate: End-to-end pipeline.
    models: Pydantic models shared across the entire package.
    config: Option precedence and the XDG data directory.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
