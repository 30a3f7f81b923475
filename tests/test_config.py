"""Tests for openapi_typegen.config -- XDG paths, project config, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from openapi_typegen.config import get_data_dir, load_project_config, resolve_options
from openapi_typegen.exceptions import ConfigError
from openapi_typegen.models import (
    GenerateOptions,
    IndentConfig,
    LogLevel,
    PropertyNaming,
    SplitStrategy,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestDataDir:
    """Crash-log directory location."""

    def test_xdg_data_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_typegen.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        path = get_data_dir()
        assert path == tmp_path / "xdg" / "openapi-typegen"
        assert path.is_dir()

    def test_xdg_default_under_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_typegen.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_data_dir() == tmp_path / ".local" / "share" / "openapi-typegen"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("openapi_typegen.config._is_xdg_platform", lambda: False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_data_dir() == tmp_path / ".openapi-typegen"


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestLoadProjectConfig:
    """Reading ./openapi-typegen.json or an explicit --config file."""

    def test_missing_default_file(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_default_file_in_cwd(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "openapi-typegen.json", {"split": "tag", "output": "types"})
        config = load_project_config()
        assert config is not None
        assert config.split == SplitStrategy.TAG
        assert config.output == "types"
        assert config.property_naming is None

    def test_explicit_path(self, isolated_config: Path) -> None:
        path = isolated_config / "conf" / "typegen.json"
        _write_json(path, {"property_naming": "camel"})
        config = load_project_config(path)
        assert config is not None
        assert config.property_naming == PropertyNaming.CAMEL

    def test_explicit_path_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_project_config(isolated_config / "nope.json")

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "openapi-typegen.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "openapi-typegen.json", ["tag"])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()

    def test_unknown_key_rejected(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "openapi-typegen.json", {"splitt": "tag"})
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_invalid_enum_value(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "openapi-typegen.json", {"split": "module"})
        with pytest.raises(ConfigError):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveOptions:
    """CLI > environment > project config > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        options = resolve_options()
        assert options.split is None
        assert options.output is None
        assert options.property_naming == PropertyNaming.PRESERVE
        assert options.indent.unit == "    "
        assert options.include_header is True
        assert options.include_endpoint_hints is True
        assert options.log_level == LogLevel.BASIC

    def test_project_config_applied(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "openapi-typegen.json",
            {"split": "path", "indent": {"width": 2}, "include_header": False},
        )
        options = resolve_options()
        assert options.split == SplitStrategy.PATH
        assert options.indent.unit == "  "
        assert options.include_header is False

    def test_env_overrides_project_config(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "openapi-typegen.json", {"split": "path"})
        monkeypatch.setenv("OPENAPI_TYPEGEN_SPLIT", "tag")
        assert resolve_options().split == SplitStrategy.TAG

    def test_env_is_case_insensitive(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAPI_TYPEGEN_PROPERTY_NAMING", " CAMEL ")
        monkeypatch.setenv("OPENAPI_TYPEGEN_LOG_LEVEL", "Verbose")
        options = resolve_options()
        assert options.property_naming == PropertyNaming.CAMEL
        assert options.log_level == LogLevel.VERBOSE

    def test_empty_env_ignored(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_TYPEGEN_SPLIT", "")
        assert resolve_options().split is None

    def test_invalid_env_value(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_TYPEGEN_SPLIT", "module")
        with pytest.raises(ConfigError, match="OPENAPI_TYPEGEN_SPLIT") as exc_info:
            resolve_options()
        assert "tag, path" in str(exc_info.value)

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_TYPEGEN_SPLIT", "tag")
        options = resolve_options({"split": SplitStrategy.PATH})
        assert options.split == SplitStrategy.PATH

    def test_cli_none_means_not_given(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAPI_TYPEGEN_SPLIT", "tag")
        options = resolve_options({"split": None, "output": None})
        assert options.split == SplitStrategy.TAG

    def test_cli_indent_replaces_config_indent(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "openapi-typegen.json", {"indent": {"width": 2}})
        options = resolve_options({"indent": IndentConfig(use_tabs=True)})
        assert options.indent.unit == "\t"

    def test_explicit_config_path(self, isolated_config: Path) -> None:
        path = isolated_config / "alt.json"
        _write_json(path, {"header_comment": "// generated"})
        options = resolve_options(config_path=path)
        assert options.header_comment == "// generated"

    def test_invalid_cli_value(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid options"):
            resolve_options({"indent": {"width": -1}})

    def test_returns_generate_options(self, isolated_config: Path) -> None:
        assert isinstance(resolve_options(), GenerateOptions)
