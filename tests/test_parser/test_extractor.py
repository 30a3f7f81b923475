"""Tests for openapi_typegen.parser.extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from openapi_typegen.exceptions import SpecLoadError
from openapi_typegen.models import SchemaNode, SpecVersion
from openapi_typegen.parser.extractor import extract_document_schemas, extract_schemas
from openapi_typegen.parser.loader import load


# ---------------------------------------------------------------------------
# extract_schemas
# ---------------------------------------------------------------------------


class TestExtractSchemas:
    """Test registry extraction for both dialects."""

    def test_openapi3_components(self, petstore_30_raw: dict[str, Any]) -> None:
        result = extract_schemas(petstore_30_raw, SpecVersion.OPENAPI3)
        assert result.version == SpecVersion.OPENAPI3
        assert set(result.registry) == {"Pet", "NewPet", "PetStatus", "Owner", "Error"}
        pet = result.registry["Pet"]
        assert isinstance(pet, SchemaNode)
        assert pet.required == ["id", "name"]
        assert pet.properties["owner"].ref == "#/components/schemas/Owner"

    def test_swagger2_definitions(self) -> None:
        spec = {
            "swagger": "2.0",
            "definitions": {"User": {"type": "object"}},
            "components": {"schemas": {"Ignored": {"type": "object"}}},
        }
        result = extract_schemas(spec, SpecVersion.OPENAPI2)
        assert list(result.registry) == ["User"]

    def test_missing_schemas_gives_empty_registry(self) -> None:
        result = extract_schemas({"openapi": "3.0.0", "paths": {}}, SpecVersion.OPENAPI3)
        assert result.registry == {}
        assert result.refs == []

    def test_refs_collected_from_whole_document(self, petstore_30_raw: dict[str, Any]) -> None:
        result = extract_schemas(petstore_30_raw, SpecVersion.OPENAPI3)
        assert "#/components/requestBodies/NewPet" in result.refs
        assert "#/components/responses/PetCreated" in result.refs

    def test_unknown_keywords_preserved(self) -> None:
        spec = {
            "openapi": "3.0.0",
            "components": {
                "schemas": {
                    "Tagged": {
                        "type": "object",
                        "discriminator": {"propertyName": "kind"},
                        "x-internal": True,
                    }
                }
            },
        }
        node = extract_schemas(spec, SpecVersion.OPENAPI3).registry["Tagged"]
        assert node.extras == {"discriminator": {"propertyName": "kind"}, "x-internal": True}
        assert node.to_dict()["x-internal"] is True

    def test_non_object_entries_skipped(self) -> None:
        spec = {"swagger": "2.0", "definitions": {"A": {"type": "string"}, "B": "oops"}}
        assert list(extract_schemas(spec, SpecVersion.OPENAPI2).registry) == ["A"]

    def test_invalid_schema_raises(self) -> None:
        spec = {"swagger": "2.0", "definitions": {"A": {"type": {"not": "a type"}}}}
        with pytest.raises(SpecLoadError, match="Invalid schema 'A'"):
            extract_schemas(spec, SpecVersion.OPENAPI2)

    def test_yaml_scalar_text_fields_coerced(self, tmp_path: Path) -> None:
        path = tmp_path / "years.yaml"
        path.write_text(
            "openapi: 3.0.3\n"
            "info: {title: Years, version: '1'}\n"
            "paths: {}\n"
            "components:\n"
            "  schemas:\n"
            "    Year:\n"
            "      type: object\n"
            "      title: 2024\n"
            "      description: 1.0\n"
            "      required: [value, 3]\n"
            "      properties:\n"
            "        value: {type: integer, format: 32}\n"
            "        flag: {type: boolean, title: true}\n",
            encoding="utf-8",
        )
        year = load(path).registry["Year"]
        assert year.title == "2024"
        assert year.description == "1.0"
        assert year.required == ["value"]
        assert year.properties["value"].format == "32"
        assert year.properties["flag"].title == "True"

    def test_non_scalar_text_fields_dropped(self) -> None:
        spec = {"swagger": "2.0", "definitions": {"A": {"description": ["not", "a", "string"]}}}
        node = extract_schemas(spec, SpecVersion.OPENAPI2).registry["A"]
        assert node.description is None


# ---------------------------------------------------------------------------
# extract_document_schemas
# ---------------------------------------------------------------------------


class TestExtractDocumentSchemas:
    """Test the looser probing used for fetched external documents."""

    def test_definitions_first(self) -> None:
        doc = {
            "definitions": {"A": {"type": "string"}},
            "components": {"schemas": {"B": {"type": "string"}}},
        }
        assert list(extract_document_schemas(doc)) == ["A"]

    def test_components_schemas(self) -> None:
        doc = {"openapi": "3.0.0", "components": {"schemas": {"B": {"type": "integer"}}}}
        assert list(extract_document_schemas(doc)) == ["B"]

    def test_top_level_objects(self) -> None:
        doc = {"Thing": {"type": "object"}, "version": "1", "Other": {"type": "string"}}
        assert list(extract_document_schemas(doc)) == ["Thing", "Other"]
