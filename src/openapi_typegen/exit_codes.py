"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi_typegen.exceptions.TypegenError` subclass.
Build scripts and CI jobs can inspect the exit code to tell a broken spec
from an unreachable schema host without parsing stderr.

Example::

    $ openapi-typegen generate openapi.json --split tag
    $ echo $?
    2   # EXIT_INVALID_USAGE -- --split needs an --output directory
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid configuration."""

EXIT_RESOLUTION_ERROR = 6
"""An external ``$ref`` document could not be fetched (network error, non-2xx, bad payload)."""

EXIT_SPEC_LOAD_ERROR = 7
"""The OpenAPI document could not be read, parsed, or its version was not recognised."""

EXIT_WRITE_ERROR = 8
"""Generated output could not be written to disk."""
