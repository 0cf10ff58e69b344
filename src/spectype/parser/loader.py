"""Load OpenAPI documents from a URL, a local file, or stdin.

This is the only module of the parser sub-package that performs I/O. It turns
a *source* string into a plain ``dict`` and checks that the document declares
an OpenAPI 3.x version; everything downstream is pure computation over that
dict.

The two public functions are:

* :func:`load_document` -- fetch and decode a document (JSON or YAML).
* :func:`validate_openapi_version` -- return the ``openapi`` version string,
  rejecting Swagger 2.x and non-3.x documents.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from spectype.exceptions import SpecParseError

_JSON = "json"
_YAML = "yaml"


def load_document(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an OpenAPI document from a URL, file path, or ``-`` for stdin.

    The format is detected from the file extension or ``Content-Type`` header
    when possible, otherwise JSON is tried before YAML.

    Args:
        source: An ``http(s)://`` URL, a file path, or ``"-"``.
        timeout: Network timeout in seconds for URL sources.

    Returns:
        The decoded document.

    Raises:
        SpecParseError: If the source cannot be read or decoded.
    """
    if source == "-":
        content, hint, origin = _read_stdin()
    elif source.startswith(("http://", "https://")):
        content, hint, origin = _read_url(source, timeout)
    else:
        content, hint, origin = _read_file(source)

    if not content.strip():
        raise SpecParseError(f"Document is empty: {origin}")
    return parse_document(content, hint=hint, origin=origin)


def _read_stdin() -> tuple[str, str, str]:
    try:
        return sys.stdin.read(), "", "stdin"
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc


def _read_url(url: str, timeout: float) -> tuple[str, str, str]:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = _JSON
    elif "yaml" in content_type or "yml" in content_type:
        hint = _YAML
    return response.text, hint, url


def _read_file(path: str) -> tuple[str, str, str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Document not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read {path}: {exc}") from exc

    suffix = file_path.suffix.lower()
    hint = {".json": _JSON, ".yaml": _YAML, ".yml": _YAML}.get(suffix, "")
    return content, hint, path


def parse_document(content: str, hint: str = "", origin: str = "<string>") -> dict[str, Any]:
    """Decode *content* as JSON or YAML.

    JSON is attempted first unless *hint* is ``"yaml"``; an explicit
    ``"json"`` hint disables the YAML fallback.

    Raises:
        SpecParseError: If the text cannot be decoded or is not a mapping.
    """
    errors: list[str] = []

    if hint != _YAML:
        try:
            return _require_mapping(json.loads(content), origin)
        except json.JSONDecodeError as exc:
            if hint == _JSON:
                raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(content), origin)
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        f"Failed to parse {origin} as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_mapping(value: Any, origin: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = type(value).__name__ if value is not None else "empty document"
        raise SpecParseError(f"{origin} must contain a JSON/YAML object (got {kind})")
    return value


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Return the document's OpenAPI version string.

    Accepts any ``3.x`` version.

    Raises:
        SpecParseError: For Swagger 2.x documents, a missing ``openapi`` field,
            or a non-3.x version.
    """
    if "swagger" in document:
        raise SpecParseError(
            f"Swagger {document['swagger']} is not supported. "
            "Convert the document to OpenAPI 3 first "
            "(e.g. https://converter.swagger.io)"
        )

    version = document.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. Only 3.x documents are supported."
        )
    return version_str
