"""Exception hierarchy for openapi-typegen.

All exceptions inherit from :class:`TypegenError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`openapi_typegen.exit_codes`. The top-level error handler in
:func:`openapi_typegen.app.main` catches ``TypegenError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TypegenError (exit 1)
    +-- ConfigError         (exit 2)
    +-- ResolutionError     (exit 6)
    +-- SpecLoadError       (exit 7)
    +-- OutputWriteError    (exit 8)
"""

from openapi_typegen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RESOLUTION_ERROR,
    EXIT_SPEC_LOAD_ERROR,
    EXIT_WRITE_ERROR,
)


class TypegenError(Exception):
    """Base exception for all openapi-typegen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`openapi_typegen.exit_codes`. The entry point
    catches this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(TypegenError):
    """Raised for configuration problems (split without an output directory, invalid config file)."""

    exit_code = EXIT_INVALID_USAGE


class SpecLoadError(TypegenError):
    """Raised when the OpenAPI document cannot be read, parsed, or has no supported version marker."""

    exit_code = EXIT_SPEC_LOAD_ERROR


class ResolutionError(TypegenError):
    """Raised when an external ``$ref`` document cannot be fetched.

    Resolution is all-or-nothing: once this is raised no partial registry
    is returned to the caller.

    Args:
        address: The base document URL (fragment stripped) that failed.
        cause: Text of the underlying failure.
    """

    exit_code = EXIT_RESOLUTION_ERROR

    def __init__(self, address: str, cause: str):
        super().__init__(f"Unresolved external $ref: {address}. {cause}")
        self.address = address
        self.cause = cause


class OutputWriteError(TypegenError):
    """Raised when a generated file cannot be written."""

    exit_code = EXIT_WRITE_ERROR
