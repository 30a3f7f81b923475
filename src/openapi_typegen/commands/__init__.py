"""Built-in CLI sub-commands for openapi-typegen.

* :mod:`~openapi_typegen.commands.generate` -- generate declarations from
  a document, to stdout, a file, or a split directory.
* :mod:`~openapi_typegen.commands.inspect` -- examine the resolved types,
  their group assignment, and the operation index without writing anything.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like
``generate``).
"""
