"""Exception hierarchy for spectype.

All exceptions inherit from :class:`SpectypeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`spectype.exit_codes`.
The top-level error handler in :func:`spectype.app.main` catches
``SpectypeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Generation is all-or-nothing: every error below aborts the run before any
output is written.

Subclass hierarchy::

    SpectypeError (exit 1)
    +-- InvalidUsageError           (exit 2)
    +-- SpecParseError              (exit 7)
    +-- UnsupportedReferenceError   (exit 8)
    +-- DanglingReferenceError      (exit 9)
    +-- RendererError               (exit 10)
    +-- ConfigError                 (exit 1)
"""

from spectype.exit_codes import (
    EXIT_DANGLING_REFERENCE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RENDERER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_UNSUPPORTED_REFERENCE,
)


class SpectypeError(Exception):
    """Base exception for all spectype errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`spectype.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpectypeError):
    """Raised for invalid CLI arguments or missing required options."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SpectypeError):
    """Raised when the OpenAPI document cannot be loaded, parsed, or fails validation."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedReferenceError(SpectypeError):
    """Raised for a ``$ref`` outside ``#/components/{schemas,responses,parameters,requestBodies}``.

    Attributes:
        ref: The offending reference string.
    """

    exit_code = EXIT_UNSUPPORTED_REFERENCE

    def __init__(self, ref: str, context: str | None = None):
        message = (
            f"Unsupported $ref '{ref}'. Only references into "
            "#/components/schemas, #/components/responses, "
            "#/components/parameters and #/components/requestBodies are resolved"
        )
        if context:
            message += f" (at {context})"
        super().__init__(message)
        self.ref = ref


class DanglingReferenceError(SpectypeError):
    """Raised when a ``$ref`` names a component key that is not declared.

    Attributes:
        ref: The offending reference string.
    """

    exit_code = EXIT_DANGLING_REFERENCE

    def __init__(self, ref: str, context: str | None = None):
        message = f"Cannot resolve $ref '{ref}': no such component"
        if context:
            message += f" (at {context})"
        super().__init__(message)
        self.ref = ref


class RendererError(SpectypeError):
    """Raised when a renderer cannot be found, fails to load, or raises while rendering."""

    exit_code = EXIT_RENDERER_ERROR


class ConfigError(SpectypeError):
    """Raised for configuration problems (missing targets, invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
