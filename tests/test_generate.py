"""Tests for openapi_typegen.generate (the end-to-end pipeline)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock, patch

import pytest

from openapi_typegen.exceptions import ConfigError, ResolutionError, SpecLoadError
from openapi_typegen.generate import generate_types, generate_types_sync, load_and_resolve
from openapi_typegen.models import GenerateOptions, SplitStrategy


def _run(spec: Any, options: GenerateOptions | None = None) -> str:
    return asyncio.run(generate_types(spec, options))


def _external_spec() -> dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "External", "version": "1"},
        "paths": {},
        "components": {
            "schemas": {"Holder": {"$ref": "https://x/schemas.json#/Thing"}},
        },
    }


# ---------------------------------------------------------------------------
# Single-file mode
# ---------------------------------------------------------------------------


class TestSingleFile:
    """Generation to a string, optionally written to one file."""

    def test_hello(self, hello_spec: dict[str, Any], bare_options: GenerateOptions) -> None:
        assert _run(hello_spec, bare_options) == (
            "/** Hello */\nexport interface Hello {\n    message?: string;\n}\n"
        )

    def test_default_header_without_label_for_mapping(self, hello_spec: dict[str, Any]) -> None:
        out = _run(hello_spec)
        assert out.startswith("/**\n * Auto-generated TypeScript types with openapi-typegen\n")
        assert "Source file" not in out

    def test_source_label_defaults_to_path(self, petstore_30_path: Path) -> None:
        out = _run(str(petstore_30_path))
        assert f" * Source file: {petstore_30_path}\n" in out

    def test_explicit_source_label_kept(self, petstore_30_path: Path) -> None:
        out = _run(petstore_30_path, GenerateOptions(source_label="petstore"))
        assert " * Source file: petstore\n" in out

    def test_endpoint_hints(self, petstore_30_path: Path) -> None:
        out = _run(petstore_30_path, GenerateOptions(include_header=False))
        assert (
            "/**\n * A pet in the store\n *\n * Used by:\n *  - GET /v1/pets\n *  - POST /v1/pets\n */\n"
            "export interface Pet {"
        ) in out

    def test_endpoint_hints_disabled(self, petstore_30_path: Path, bare_options: GenerateOptions) -> None:
        assert "Used by" not in _run(petstore_30_path, bare_options)

    def test_swagger2_yaml(self, users_20_path: Path, bare_options: GenerateOptions) -> None:
        out = _run(users_20_path, bare_options)
        assert (
            "/** User */\n"
            "export interface User {\n"
            "    id: number;\n"
            "    display_name?: string;\n"
            "}\n"
        ) in out
        assert "export interface NewUser {" in out

    def test_writes_output_file(
        self, hello_spec: dict[str, Any], tmp_path: Path
    ) -> None:
        target = tmp_path / "nested" / "dir" / "types.ts"
        options = GenerateOptions(include_header=False, output=str(target))
        out = _run(hello_spec, options)
        assert target.read_text(encoding="utf-8") == out

    def test_invalid_document(self) -> None:
        with pytest.raises(SpecLoadError):
            _run({"info": {"title": "no version"}})

    def test_sync_wrapper(self, hello_spec: dict[str, Any], bare_options: GenerateOptions) -> None:
        assert "export interface Hello" in generate_types_sync(hello_spec, bare_options)


# ---------------------------------------------------------------------------
# External references
# ---------------------------------------------------------------------------


class TestExternalRefs:
    """External documents through the whole pipeline."""

    def test_caller_resolver(self, bare_options: GenerateOptions) -> None:
        resolver = Mock(return_value={"Thing": {"type": "object", "properties": {"id": {"type": "string"}}}})
        options = bare_options.model_copy(update={"resolver": resolver})
        out = _run(_external_spec(), options)
        resolver.assert_called_once_with("https://x/schemas.json")
        assert "export type Holder = Thing;" in out
        assert "export interface Thing {\n    id?: string;\n}" in out

    def test_default_resolver_used(self, bare_options: GenerateOptions) -> None:
        fetch = AsyncMock(return_value={"Thing": {"type": "string"}})
        with patch("openapi_typegen.generate.default_resolver", fetch):
            out = _run(_external_spec(), bare_options)
        fetch.assert_awaited_once_with("https://x/schemas.json")
        assert "export type Thing = string;" in out

    def test_fetch_failure_is_fatal(self, bare_options: GenerateOptions) -> None:
        resolver = Mock(side_effect=OSError("unreachable"))
        options = bare_options.model_copy(update={"resolver": resolver})
        with pytest.raises(ResolutionError, match="https://x/schemas.json"):
            _run(_external_spec(), options)


# ---------------------------------------------------------------------------
# Split mode
# ---------------------------------------------------------------------------


class TestSplitMode:
    """Split output through the whole pipeline."""

    def test_split_without_output_fails_before_io(self, petstore_30_path: Path) -> None:
        resolver = Mock()
        options = GenerateOptions(split=SplitStrategy.TAG, resolver=resolver)
        with patch("openapi_typegen.generate.load") as mock_load:
            with pytest.raises(ConfigError, match="output directory"):
                _run(str(petstore_30_path), options)
        mock_load.assert_not_called()
        resolver.assert_not_called()

    def test_split_by_tag(self, petstore_30_path: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "types"
        options = GenerateOptions(
            split=SplitStrategy.TAG, output=str(out_dir), header_comment="// generated"
        )
        index = _run(petstore_30_path, options)
        assert index == (
            "// generated\n"
            "\n"
            'export type { Error, Owner } from "./common.ts";\n'
            'export type { NewPet, PetStatus, Pet } from "./pets.ts";\n'
        )
        pets = (out_dir / "pets.ts").read_text(encoding="utf-8")
        assert " *  - GET /v1/pets" in pets

    def test_scenario_shared_type_promoted(self, tagged_spec: dict[str, Any], tmp_path: Path) -> None:
        options = GenerateOptions(split=SplitStrategy.TAG, output=str(tmp_path), include_header=False)
        index = _run(tagged_spec, options)
        assert index == (
            'export type { Pet } from "./common.ts";\n'
            'export type { Other } from "./other.ts";\n'
        )
        assert not (tmp_path / "pets.ts").exists()


# ---------------------------------------------------------------------------
# load_and_resolve
# ---------------------------------------------------------------------------


class TestLoadAndResolve:
    """The loading half of the pipeline used by the inspect commands."""

    def test_returns_registry_and_operations(self, petstore_30_path: Path) -> None:
        loaded, registry, operations = asyncio.run(
            load_and_resolve(petstore_30_path, GenerateOptions())
        )
        assert loaded.spec["info"]["title"] == "Petstore API"
        assert list(registry) == ["Pet", "NewPet", "PetStatus", "Owner", "Error"]
        assert len(operations) == 4
