"""OpenAPI document parser -- load documents, resolve ``$ref`` names, normalize discriminators.

This sub-package covers the front of the spectype pipeline: turning a raw
OpenAPI 3.x document (JSON or YAML, local file or remote URL) into the plain
dict the synthesizers read, plus the two leaf services every later stage
relies on.

Typical usage::

    from spectype.parser import load_document, validate_openapi_version

    document = load_document("petstore.yaml")
    validate_openapi_version(document)

Sub-modules:

* :mod:`~spectype.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~spectype.parser.resolver` -- maps ``$ref`` strings to type names and
  component objects; rejects unsupported roots and dangling keys.
* :mod:`~spectype.parser.discriminator` -- pins discriminator values onto
  the variant schemas before synthesis.
"""

from spectype.parser.discriminator import normalize_discriminators
from spectype.parser.loader import load_document, parse_document, validate_openapi_version
from spectype.parser.resolver import ReferenceResolver, is_reference, ref_name

__all__ = [
    "load_document",
    "parse_document",
    "validate_openapi_version",
    "normalize_discriminators",
    "ReferenceResolver",
    "is_reference",
    "ref_name",
]
