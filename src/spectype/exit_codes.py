"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~spectype.exceptions.SpectypeError` subclass.
Build scripts can inspect the exit code to tell a broken document apart from
a broken renderer without parsing stderr.

Example::

    $ spectype generate --file api.yaml --output api.ts
    $ echo $?
    9   # EXIT_DANGLING_REFERENCE -- a $ref points at a missing component
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded, parsed or validated."""

EXIT_UNSUPPORTED_REFERENCE = 8
"""A ``$ref`` points outside the supported ``#/components/*`` roots."""

EXIT_DANGLING_REFERENCE = 9
"""A ``$ref`` names a component that does not exist in the document."""

EXIT_RENDERER_ERROR = 10
"""A renderer failed to load or raised while producing output."""
