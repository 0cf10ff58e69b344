"""Tests for spectype.synth.definitions."""

from __future__ import annotations

import logging

import pytest

from spectype.exceptions import DanglingReferenceError
from spectype.models import (
    ANY,
    NUMBER,
    STRING,
    VOID,
    ArrayOf,
    DeclarationShape,
    Intersection,
    NamedRef,
    Nullable,
    ObjectShape,
)
from spectype.parser.resolver import ReferenceResolver
from spectype.synth.definitions import (
    TypeRegistry,
    component_definitions,
    declaration_shape,
    define,
    join_docs,
    pick_media_schema,
    request_body_definitions,
    response_definitions,
    schema_definitions,
)


# ---------------------------------------------------------------------------
# TypeRegistry
# ---------------------------------------------------------------------------


class TestTypeRegistry:
    def test_register_and_get(self) -> None:
        registry = TypeRegistry()
        definition = define("Pet", STRING, source="components.schemas.Pet")
        registry.register(definition)
        assert registry.get("Pet") is definition
        assert "Pet" in registry
        assert len(registry) == 1

    def test_order_is_first_registration(self) -> None:
        registry = TypeRegistry()
        registry.register_all(
            [define("B", STRING, source="b"), define("A", NUMBER, source="a")]
        )
        assert [d.name for d in registry] == ["B", "A"]

    def test_collision_recorded_and_last_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = TypeRegistry()
        registry.register(define("PetResponse", STRING, source="components.schemas.PetResponse"))
        with caplog.at_level(logging.WARNING, logger="spectype"):
            registry.register(define("PetResponse", NUMBER, source="components.responses.Pet"))

        assert registry.get("PetResponse").expression == NUMBER
        assert len(registry) == 1
        [collision] = registry.collisions
        assert collision.name == "PetResponse"
        assert collision.previous_source == "components.schemas.PetResponse"
        assert collision.source == "components.responses.Pet"
        assert "overrides" in caplog.text

    def test_same_source_is_not_a_collision(self) -> None:
        registry = TypeRegistry()
        registry.register(define("Pet", STRING, source="components.schemas.Pet"))
        registry.register(define("Pet", STRING, source="components.schemas.Pet"))
        assert registry.collisions == []

    def test_collisions_property_is_a_copy(self) -> None:
        registry = TypeRegistry()
        registry.collisions.append("junk")  # type: ignore[arg-type]
        assert registry.collisions == []


class TestDeclarationShape:
    def test_bare_object_is_structural(self) -> None:
        assert declaration_shape(ObjectShape()) is DeclarationShape.STRUCTURAL

    @pytest.mark.parametrize(
        "expression",
        [
            STRING,
            ArrayOf(item=STRING),
            NamedRef(name="Pet"),
            Nullable(inner=ObjectShape()),
            Intersection(members=(NamedRef(name="A"), ObjectShape())),
        ],
    )
    def test_everything_else_is_alias(self, expression) -> None:
        assert declaration_shape(expression) is DeclarationShape.ALIAS

    def test_define_drops_empty_doc(self) -> None:
        assert define("Pet", STRING, doc="").doc is None


class TestHelpers:
    def test_join_docs(self) -> None:
        assert join_docs(" Summary ", None, "", "Details") == "Summary\n\nDetails"

    def test_join_docs_nothing(self) -> None:
        assert join_docs(None, "  ") is None

    def test_pick_prefers_json(self) -> None:
        content = {
            "text/plain": {"schema": {"type": "string"}},
            "application/json; charset=utf-8": {"schema": {"type": "integer"}},
        }
        assert pick_media_schema(content) == {"type": "integer"}

    def test_pick_json_case_insensitive(self) -> None:
        content = {
            "application/xml": {"schema": {"type": "string"}},
            "Application/JSON": {"schema": {"type": "boolean"}},
        }
        assert pick_media_schema(content) == {"type": "boolean"}

    def test_pick_falls_back_to_first_with_schema(self) -> None:
        content = {
            "application/octet-stream": {},
            "text/plain": {"schema": {"type": "string"}},
        }
        assert pick_media_schema(content) == {"type": "string"}

    def test_pick_nothing(self) -> None:
        assert pick_media_schema({"application/json": {}}) is None
        assert pick_media_schema(None) is None


# ---------------------------------------------------------------------------
# Component definitions
# ---------------------------------------------------------------------------


@pytest.fixture
def components() -> dict:
    return {
        "schemas": {
            "pet": {
                "type": "object",
                "description": "A pet.",
                "properties": {"id": {"type": "integer"}},
            },
            "petList": {"type": "array", "items": {"$ref": "#/components/schemas/pet"}},
            "animal": {"$ref": "#/components/schemas/pet"},
        },
        "responses": {
            "pet": {
                "description": "A single pet",
                "content": {
                    "application/json": {
                        "schema": {"$ref": "#/components/schemas/pet"},
                    }
                },
            },
            "empty": {"description": "Nothing"},
            "inline": {
                "description": "Inline body",
                "content": {
                    "application/json": {
                        "schema": {"type": "string", "description": "A token."}
                    }
                },
            },
        },
        "requestBodies": {
            "pet": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/pet"}}}},
            "raw": {"description": "Anything goes"},
        },
    }


class TestSchemaDefinitions:
    def test_names_and_shapes(self, components: dict) -> None:
        definitions = schema_definitions(components["schemas"], ReferenceResolver(components))
        by_name = {d.name: d for d in definitions}

        assert list(by_name) == ["Pet", "PetList", "Animal"]
        assert by_name["Pet"].declaration_shape is DeclarationShape.STRUCTURAL
        assert by_name["Pet"].doc == "A pet."
        assert by_name["Pet"].source == "components.schemas.pet"
        assert by_name["PetList"].expression == ArrayOf(item=NamedRef(name="Pet"))
        assert by_name["PetList"].declaration_shape is DeclarationShape.ALIAS

    def test_ref_schema_is_alias(self, components: dict) -> None:
        definitions = schema_definitions(components["schemas"], ReferenceResolver(components))
        animal = next(d for d in definitions if d.name == "Animal")
        assert animal.expression == NamedRef(name="Pet")
        assert animal.declaration_shape is DeclarationShape.ALIAS

    def test_dangling_schema_ref_raises(self) -> None:
        schemas = {"a": {"$ref": "#/components/schemas/b"}}
        with pytest.raises(DanglingReferenceError):
            schema_definitions(schemas, ReferenceResolver({"schemas": schemas}))


class TestResponseDefinitions:
    def test_response_suffix_and_doc(self, components: dict) -> None:
        definitions = response_definitions(components["responses"], ReferenceResolver(components))
        by_name = {d.name: d for d in definitions}

        assert by_name["PetResponse"].expression == NamedRef(name="Pet")
        assert by_name["PetResponse"].doc == "A single pet"
        assert by_name["PetResponse"].source == "components.responses.pet"

    def test_no_content_is_void(self, components: dict) -> None:
        definitions = response_definitions(components["responses"], ReferenceResolver(components))
        empty = next(d for d in definitions if d.name == "EmptyResponse")
        assert empty.expression == VOID

    def test_doc_joins_schema_description(self, components: dict) -> None:
        definitions = response_definitions(components["responses"], ReferenceResolver(components))
        inline = next(d for d in definitions if d.name == "InlineResponse")
        assert inline.expression == STRING
        assert inline.doc == "Inline body\n\nA token."


class TestRequestBodyDefinitions:
    def test_request_body_suffix(self, components: dict) -> None:
        definitions = request_body_definitions(
            components["requestBodies"], ReferenceResolver(components)
        )
        by_name = {d.name: d for d in definitions}
        assert by_name["PetRequestBody"].expression == NamedRef(name="Pet")
        assert by_name["RawRequestBody"].expression == ANY
        assert by_name["RawRequestBody"].doc == "Anything goes"


class TestComponentDefinitions:
    def test_registration_order(self, components: dict) -> None:
        registry = component_definitions(components, ReferenceResolver(components), TypeRegistry())
        assert [d.name for d in registry.definitions] == [
            "Pet",
            "PetList",
            "Animal",
            "PetResponse",
            "EmptyResponse",
            "InlineResponse",
            "PetRequestBody",
            "RawRequestBody",
        ]
        assert registry.collisions == []

    def test_schema_and_response_collision(self) -> None:
        components = {
            "schemas": {"PetResponse": {"type": "string"}},
            "responses": {"pet": {"description": "Pet"}},
        }
        registry = component_definitions(components, ReferenceResolver(components), TypeRegistry())
        [collision] = registry.collisions
        assert collision.name == "PetResponse"
        assert registry.get("PetResponse").expression == VOID

    def test_missing_sections(self) -> None:
        registry = component_definitions({}, ReferenceResolver({}), TypeRegistry())
        assert len(registry) == 0
