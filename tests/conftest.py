"""Shared test fixtures for openapi-typegen.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from openapi_typegen.models import GenerateOptions
from openapi_typegen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When pytest or Typer's CliRunner redirects those streams
    and the test finishes, the cached references become stale. ``NO_COLOR``
    keeps diagnostics as unwrapped plain text so tests can match on them.
    """
    monkeypatch.setenv("NO_COLOR", "1")
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_30_path() -> Path:
    """Path to the petstore 3.0 JSON fixture."""
    return FIXTURES_DIR / "petstore_3.0.json"


@pytest.fixture
def petstore_30_raw(petstore_30_path: Path) -> dict[str, Any]:
    """Load raw petstore 3.0 spec dict."""
    with open(petstore_30_path) as f:
        return json.load(f)


@pytest.fixture
def users_20_path() -> Path:
    """Path to the Swagger 2.0 YAML fixture."""
    return FIXTURES_DIR / "users_2.0.yaml"


@pytest.fixture
def hello_spec() -> dict[str, Any]:
    """Minimal OpenAPI 3 document with a single schema and no paths."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "Hello", "version": "1"},
        "paths": {},
        "components": {
            "schemas": {
                "Hello": {
                    "type": "object",
                    "properties": {"message": {"type": "string"}},
                }
            }
        },
    }


@pytest.fixture
def tagged_spec() -> dict[str, Any]:
    """Two tags whose types depend on each other across groups.

    ``Pet`` is used only by a ``pets``-tagged operation, ``Other`` only by
    an ``other``-tagged one, and ``Other`` references ``Pet``.
    """
    return {
        "openapi": "3.0.0",
        "info": {"title": "Tagged", "version": "1"},
        "paths": {
            "/pets": {
                "get": {
                    "tags": ["pets"],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Pet"}
                                }
                            },
                        }
                    },
                }
            },
            "/other": {
                "get": {
                    "tags": ["other"],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Other"}
                                }
                            },
                        }
                    },
                }
            },
        },
        "components": {
            "schemas": {
                "Pet": {"type": "object", "properties": {"id": {"type": "string"}}},
                "Other": {
                    "type": "object",
                    "properties": {"pet": {"$ref": "#/components/schemas/Pet"}},
                },
            }
        },
    }


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture
def bare_options() -> GenerateOptions:
    """Options without header or endpoint hints, for exact-output assertions."""
    return GenerateOptions(include_header=False, include_endpoint_hints=False)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME at tmp_path, clears all OPENAPI_TYPEGEN_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "OPENAPI_TYPEGEN_SPLIT",
        "OPENAPI_TYPEGEN_PROPERTY_NAMING",
        "OPENAPI_TYPEGEN_LOG_LEVEL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a PLAIN-format, verbose OutputManager so debug lines are emitted."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
