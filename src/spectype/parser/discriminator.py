"""Propagate ``discriminator`` mappings into the variant schemas.

Given::

    Error:
      oneOf: [GeneralError, FieldError]
      discriminator:
        propertyName: type
        mapping:
          GeneralError: "#/components/schemas/GeneralError"
          FieldError: "#/components/schemas/FieldError"

each variant's ``type`` property is narrowed to a single-value ``enum``
(``["GeneralError"]`` / ``["FieldError"]``). After this pass a discriminated
union needs no special handling: the variants already carry literal tags, so
the type synthesizer treats it like any other ``oneOf``.

Variants that are not listed in ``mapping`` are left untouched.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from spectype.exceptions import DanglingReferenceError, UnsupportedReferenceError
from spectype.parser.resolver import is_reference, split_ref

logger = logging.getLogger(__name__)


def normalize_discriminators(schemas: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *schemas* with discriminator values pinned on every mapped variant.

    The input map is not modified. Running the pass on its own output yields
    an equal map (the ``enum`` is simply rewritten with the same value).

    Args:
        schemas: The ``components.schemas`` mapping.

    Returns:
        A **new** schema map.

    Raises:
        UnsupportedReferenceError: If a mapping value points outside
            ``#/components/schemas``.
        DanglingReferenceError: If a mapping value names an undeclared schema.
    """
    normalized = copy.deepcopy(schemas)

    for owner, schema in normalized.items():
        if not isinstance(schema, dict) or is_reference(schema):
            continue
        discriminator = schema.get("discriminator")
        if not isinstance(discriminator, dict):
            continue
        property_name = discriminator.get("propertyName")
        mapping = discriminator.get("mapping") or {}
        if not property_name or not isinstance(mapping, dict):
            continue

        for variant, target in mapping.items():
            key = _schema_key(target, context=f"components.schemas.{owner}.discriminator")
            if key not in normalized:
                raise DanglingReferenceError(str(target), f"components.schemas.{owner}.discriminator")
            properties = _discriminated_properties(normalized[key], property_name)
            if properties is None:
                logger.debug(
                    "Schema '%s' declares no '%s' property to pin for discriminator on '%s'",
                    key,
                    property_name,
                    owner,
                )
                continue
            existing = properties.get(property_name)
            facets = dict(existing) if isinstance(existing, dict) and not is_reference(existing) else {}
            facets.setdefault("type", "string")
            facets["enum"] = [variant]
            properties[property_name] = facets

    return normalized


def _schema_key(target: Any, context: str) -> str:
    """Return the schema key a mapping value points at.

    Mapping values are usually references, but OpenAPI also allows the bare
    schema name.
    """
    if isinstance(target, str) and not target.startswith("#"):
        return target
    section, key = split_ref(target, context)
    if section != "schemas":
        raise UnsupportedReferenceError(str(target), context)
    return key


def _discriminated_properties(schema: Any, property_name: str) -> dict[str, Any] | None:
    """Find the ``properties`` map of *schema* that should carry the discriminator.

    Plain object schemas get their own map (created if needed). For ``allOf``
    variants the first inline member declaring *property_name* is used;
    when the property is inherited from a referenced base, it is pinned in a
    ``properties`` map next to ``allOf``.
    """
    if not isinstance(schema, dict) or is_reference(schema):
        return None
    if "allOf" in schema:
        for member in schema.get("allOf") or []:
            props = member.get("properties") if isinstance(member, dict) else None
            if isinstance(props, dict) and property_name in props:
                return props
    elif "oneOf" in schema or "anyOf" in schema:
        return None
    props = schema.get("properties")
    if props is None:
        props = schema["properties"] = {}
    return props if isinstance(props, dict) else None
