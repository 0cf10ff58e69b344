"""Tests for spectype.synth.pipeline -- whole-document synthesis."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from spectype.exceptions import DanglingReferenceError, UnsupportedReferenceError
from spectype.models import (
    NUMBER,
    VOID,
    ArrayOf,
    DeclarationShape,
    Intersection,
    LiteralUnion,
    NamedRef,
    ObjectField,
    ObjectShape,
)
from spectype.synth.pipeline import generate, iter_operations


class TestIterOperations:
    def test_declaration_order_and_filtering(self) -> None:
        paths = {
            "/b": {
                "parameters": [{"name": "x", "in": "query"}],
                "summary": "B",
                "post": {},
                "get": {},
                "head": {},
            },
            "/a": {"delete": {}},
        }
        found = iter_operations(paths)
        assert [(ref.route, ref.verb) for ref in found] == [
            ("/b", "post"),
            ("/b", "get"),
            ("/a", "delete"),
        ]
        assert found[0].inherited_parameters == [{"name": "x", "in": "query"}]
        assert found[2].inherited_parameters == []

    def test_no_paths(self) -> None:
        assert iter_operations(None) == []


class TestGeneratePetstore:
    """End-to-end synthesis of the petstore fixture."""

    def test_definitions(self, petstore_raw: dict[str, Any]) -> None:
        result = generate(petstore_raw)
        assert [d.name for d in result.definitions] == [
            "Pet",
            "NewPet",
            "Error",
            "FindPetsQueryParams",
            "FindPetsResponse",
        ]
        by_name = {d.name: d for d in result.definitions}
        assert by_name["Pet"].declaration_shape is DeclarationShape.ALIAS
        assert by_name["Pet"].expression == Intersection(
            members=(
                NamedRef(name="NewPet"),
                ObjectShape(properties=(ObjectField(name="id", type=NUMBER),)),
            )
        )
        assert by_name["NewPet"].declaration_shape is DeclarationShape.STRUCTURAL
        assert by_name["NewPet"].doc == "A pet that has not been stored yet."
        assert by_name["FindPetsResponse"].expression == ArrayOf(item=NamedRef(name="Pet"))
        assert result.collisions == []

    def test_components(self, petstore_raw: dict[str, Any]) -> None:
        result = generate(petstore_raw)
        by_name = {c.name: c for c in result.components}
        assert list(by_name) == ["FindPets", "AddPet", "FindPetById", "DeletePet"]

        find_pets = by_name["FindPets"]
        assert find_pets.query_params_type == NamedRef(name="FindPetsQueryParams")
        assert find_pets.response_type == NamedRef(name="FindPetsResponse")
        assert find_pets.error_type == NamedRef(name="Error")
        assert find_pets.tags == ("pets",)
        assert find_pets.doc == "List all pets\n\nReturns all pets the user has access to."

        add_pet = by_name["AddPet"]
        assert add_pet.body_type == NamedRef(name="NewPet")
        assert add_pet.response_type == NamedRef(name="Pet")

        by_id = by_name["FindPetById"]
        assert [(p.name, p.type) for p in by_id.path_params] == [("id", NUMBER)]
        assert by_id.route == "/pets/${id}"

        delete = by_name["DeletePet"]
        assert delete.path_params == ()
        assert delete.route == "/pets"
        assert delete.response_type == VOID

    def test_document_not_mutated(self, petstore_raw: dict[str, Any]) -> None:
        before = copy.deepcopy(petstore_raw)
        generate(petstore_raw)
        assert petstore_raw == before

    def test_workers_do_not_change_result(self, petstore_raw: dict[str, Any]) -> None:
        assert generate(petstore_raw, workers=4) == generate(petstore_raw, workers=1)

    def test_naming_hook_reaches_operations(self, petstore_raw: dict[str, Any]) -> None:
        for operation in petstore_raw["paths"]["/pets"].values():
            operation.pop("operationId")
        result = generate(petstore_raw, name_operation=lambda verb, route: f"{verb}All")
        assert [c.name for c in result.components][:2] == ["GetAll", "PostAll"]
        assert "GetAllQueryParams" in [d.name for d in result.definitions]


class TestGenerateDiagnostics:
    def test_discriminator_values_pinned(self) -> None:
        document = {
            "openapi": "3.0.0",
            "paths": {},
            "components": {
                "schemas": {
                    "Animal": {
                        "oneOf": [{"$ref": "#/components/schemas/Cat"}],
                        "discriminator": {
                            "propertyName": "kind",
                            "mapping": {"cat": "#/components/schemas/Cat"},
                        },
                    },
                    "Cat": {
                        "type": "object",
                        "required": ["kind"],
                        "properties": {"kind": {"type": "string"}},
                    },
                }
            },
        }
        result = generate(document)
        cat = next(d for d in result.definitions if d.name == "Cat")
        assert cat.expression.properties[0].type == LiteralUnion(values=("cat",))
        assert "enum" not in document["components"]["schemas"]["Cat"]["properties"]["kind"]

    def test_discriminator_pinned_on_inherited_property(self) -> None:
        document = {
            "openapi": "3.0.0",
            "paths": {},
            "components": {
                "schemas": {
                    "Pet": {
                        "type": "object",
                        "required": ["petType"],
                        "properties": {"petType": {"type": "string"}},
                        "discriminator": {
                            "propertyName": "petType",
                            "mapping": {"dog": "#/components/schemas/Dog"},
                        },
                    },
                    "Dog": {
                        "allOf": [
                            {"$ref": "#/components/schemas/Pet"},
                            {"type": "object", "properties": {"bark": {"type": "boolean"}}},
                        ]
                    },
                }
            },
        }
        result = generate(document)
        dog = next(d for d in result.definitions if d.name == "Dog")
        assert isinstance(dog.expression, Intersection)
        assert dog.expression.members[0] == NamedRef(name="Pet")
        assert ObjectShape(
            properties=(
                ObjectField(name="petType", type=LiteralUnion(values=("dog",)), optional=True),
            )
        ) in dog.expression.members

    def test_aux_definition_collision_reported(self, petstore_raw: dict[str, Any]) -> None:
        petstore_raw["components"]["schemas"]["FindPetsResponse"] = {"type": "string"}
        result = generate(petstore_raw)
        [collision] = result.collisions
        assert collision.name == "FindPetsResponse"
        assert collision.previous_source == "components.schemas.FindPetsResponse"
        assert collision.source == "paths./pets.get.responses"
        final = next(d for d in result.definitions if d.name == "FindPetsResponse")
        assert final.expression == ArrayOf(item=NamedRef(name="Pet"))

    def test_dangling_reference_aborts(self, petstore_raw: dict[str, Any]) -> None:
        petstore_raw["paths"]["/pets"]["post"]["requestBody"]["content"]["application/json"][
            "schema"
        ] = {"$ref": "#/components/schemas/Missing"}
        with pytest.raises(DanglingReferenceError, match="Missing"):
            generate(petstore_raw, workers=2)

    def test_unsupported_reference_aborts(self, petstore_raw: dict[str, Any]) -> None:
        petstore_raw["components"]["schemas"]["NewPet"]["properties"]["tag"] = {
            "$ref": "common.yaml#/Tag"
        }
        with pytest.raises(UnsupportedReferenceError):
            generate(petstore_raw)

    def test_document_without_components(self) -> None:
        result = generate({"openapi": "3.0.0", "paths": {"/ping": {"get": {"responses": {}}}}})
        assert result.definitions == []
        assert [c.name for c in result.components] == ["GetPing"]
