"""Named type definitions for ``components`` and the registry that collects them.

Every top-level entry of ``components.schemas``, ``components.responses`` and
``components.requestBodies`` becomes one
:class:`~spectype.models.NamedTypeDefinition`:

* schemas keep their (PascalCase) key: ``pet`` -> ``Pet``;
* responses get a ``Response`` suffix: ``pet`` -> ``PetResponse``;
* request bodies get a ``RequestBody`` suffix: ``pet`` -> ``PetRequestBody``.

A definition whose expression is a bare :class:`~spectype.models.ObjectShape`
is *structural* (an interface); anything else -- unions, intersections,
scalars, references, nullable objects -- is an *alias*.

:class:`TypeRegistry` replaces ambient "already generated" dictionaries: it is
an explicit value threaded through a generation run, keyed by type name, that
records a :class:`~spectype.models.NamingCollision` whenever two different
sources claim the same name. Collisions are warnings, not errors; the last
definition registered wins.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Optional

from spectype.models import (
    ANY,
    VOID,
    DeclarationShape,
    NamedRef,
    NamedTypeDefinition,
    NamingCollision,
    ObjectShape,
    TypeExpression,
)
from spectype.parser.resolver import ReferenceResolver, component_type_name, is_reference
from spectype.synth.types import synthesize

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Ordered ``name -> definition`` map with collision diagnostics.

    Example::

        registry = TypeRegistry()
        registry.register_all(schema_definitions(schemas, resolver))
        for collision in registry.collisions:
            print(collision.message)
    """

    def __init__(self) -> None:
        self._definitions: dict[str, NamedTypeDefinition] = {}
        self._collisions: list[NamingCollision] = []

    def register(self, definition: NamedTypeDefinition) -> None:
        """Add *definition*, flagging a collision if another source owns its name."""
        previous = self._definitions.get(definition.name)
        if previous is not None and previous.source != definition.source:
            collision = NamingCollision(
                name=definition.name,
                previous_source=previous.source,
                source=definition.source,
            )
            logger.warning("%s", collision.message)
            self._collisions.append(collision)
        self._definitions[definition.name] = definition

    def register_all(self, definitions: Iterable[NamedTypeDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def get(self, name: str) -> Optional[NamedTypeDefinition]:
        return self._definitions.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[NamedTypeDefinition]:
        return iter(list(self._definitions.values()))

    @property
    def definitions(self) -> list[NamedTypeDefinition]:
        """All definitions in first-registration order."""
        return list(self._definitions.values())

    @property
    def collisions(self) -> list[NamingCollision]:
        return list(self._collisions)


def declaration_shape(expression: TypeExpression) -> DeclarationShape:
    """Return ``STRUCTURAL`` only for a bare object shape, ``ALIAS`` otherwise."""
    if isinstance(expression, ObjectShape):
        return DeclarationShape.STRUCTURAL
    return DeclarationShape.ALIAS


def define(
    name: str,
    expression: TypeExpression,
    doc: Optional[str] = None,
    source: str = "",
) -> NamedTypeDefinition:
    """Build a :class:`NamedTypeDefinition`, choosing its declaration shape."""
    return NamedTypeDefinition(
        name=name,
        expression=expression,
        declaration_shape=declaration_shape(expression),
        doc=doc or None,
        source=source,
    )


def join_docs(*parts: Optional[str]) -> Optional[str]:
    """Join non-empty documentation fragments with a blank line."""
    kept = [p.strip() for p in parts if isinstance(p, str) and p.strip()]
    return "\n\n".join(kept) if kept else None


def pick_media_schema(content: Any) -> Optional[Any]:
    """Return the schema of the preferred media type in a ``content`` map.

    ``application/json`` media types win (case-insensitive, parameters such
    as ``;charset=utf-8`` ignored); otherwise the first declared media type
    that has a schema is used.
    """
    if not isinstance(content, dict):
        return None
    with_schema = [
        (str(media_type), media)
        for media_type, media in content.items()
        if isinstance(media, dict) and "schema" in media
    ]
    for media_type, media in with_schema:
        if media_type.split(";", 1)[0].strip().lower().startswith("application/json"):
            return media["schema"]
    return with_schema[0][1]["schema"] if with_schema else None


def schema_definitions(
    schemas: dict[str, Any],
    resolver: ReferenceResolver,
) -> list[NamedTypeDefinition]:
    """One definition per ``components.schemas`` entry.

    A schema that is itself a bare ``$ref`` becomes an alias of the target.
    The schema's ``description`` becomes the definition's doc.
    """
    definitions: list[NamedTypeDefinition] = []
    for key, schema in schemas.items():
        name = component_type_name("schemas", key)
        source = f"components.schemas.{key}"
        if is_reference(schema):
            expression: TypeExpression = NamedRef(name=resolver.name_for(schema["$ref"], source))
            doc = None
        else:
            expression = synthesize(schema, name, resolver)
            doc = schema.get("description") if isinstance(schema, dict) else None
        definitions.append(define(name, expression, doc, source))
    return definitions


def response_definitions(
    responses: dict[str, Any],
    resolver: ReferenceResolver,
) -> list[NamedTypeDefinition]:
    """One ``<Key>Response`` definition per ``components.responses`` entry.

    The doc combines the response's own ``description`` with the body
    schema's ``description``. A response without a body declares ``void``.
    """
    return _content_definitions("responses", responses, resolver, empty=VOID)


def request_body_definitions(
    request_bodies: dict[str, Any],
    resolver: ReferenceResolver,
) -> list[NamedTypeDefinition]:
    """One ``<Key>RequestBody`` definition per ``components.requestBodies`` entry."""
    return _content_definitions("requestBodies", request_bodies, resolver, empty=ANY)


def _content_definitions(
    section: str,
    entries: dict[str, Any],
    resolver: ReferenceResolver,
    empty: TypeExpression,
) -> list[NamedTypeDefinition]:
    definitions: list[NamedTypeDefinition] = []
    for key, entry in entries.items():
        name = component_type_name(section, key)
        source = f"components.{section}.{key}"
        if is_reference(entry):
            expression: TypeExpression = NamedRef(name=resolver.name_for(entry["$ref"], source))
            doc = None
        elif isinstance(entry, dict):
            schema = pick_media_schema(entry.get("content"))
            expression = synthesize(schema, name, resolver) if schema is not None else empty
            schema_doc = schema.get("description") if isinstance(schema, dict) else None
            doc = join_docs(entry.get("description"), schema_doc)
        else:
            expression, doc = empty, None
        definitions.append(define(name, expression, doc, source))
    return definitions


def component_definitions(
    components: dict[str, Any],
    resolver: ReferenceResolver,
    registry: TypeRegistry,
) -> TypeRegistry:
    """Register schema, response and request-body definitions, in that order."""
    registry.register_all(schema_definitions(_section(components, "schemas"), resolver))
    registry.register_all(response_definitions(_section(components, "responses"), resolver))
    registry.register_all(
        request_body_definitions(_section(components, "requestBodies"), resolver)
    )
    logger.debug("Registered %d component definitions", len(registry))
    return registry


def _section(components: dict[str, Any], name: str) -> dict[str, Any]:
    section = components.get(name)
    return section if isinstance(section, dict) else {}
