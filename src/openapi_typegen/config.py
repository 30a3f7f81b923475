"""Configuration: XDG data directory, project config, and precedence resolution.

* **Directory layout** -- crash logs go under the XDG data directory on
  Linux/BSD and ``~/.openapi-typegen/`` elsewhere. See :func:`get_data_dir`.
* **Project config** -- an optional ``openapi-typegen.json`` in the current
  directory (or a path given with ``--config``), deserialised into a
  :class:`~openapi_typegen.models.ProjectConfig`.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, the project config, and defaults into one
  :class:`~openapi_typegen.models.GenerateOptions`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from openapi_typegen.exceptions import ConfigError
from openapi_typegen.models import (
    GenerateOptions,
    LogLevel,
    PropertyNaming,
    ProjectConfig,
    SplitStrategy,
)

_APP_NAME = "openapi-typegen"
_PROJECT_CONFIG_FILENAME = "openapi-typegen.json"

ENV_SPLIT = "OPENAPI_TYPEGEN_SPLIT"
ENV_PROPERTY_NAMING = "OPENAPI_TYPEGEN_PROPERTY_NAMING"
ENV_LOG_LEVEL = "OPENAPI_TYPEGEN_LOG_LEVEL"

_ENV_OPTIONS: dict[str, tuple[str, type]] = {
    ENV_SPLIT: ("split", SplitStrategy),
    ENV_PROPERTY_NAMING: ("property_naming", PropertyNaming),
    ENV_LOG_LEVEL: ("log_level", LogLevel),
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back under ``$HOME``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi-typegen/`` (default
    ``~/.local/share/openapi-typegen/``). Elsewhere: ``~/.openapi-typegen/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(path: Optional[str | Path] = None) -> Optional[ProjectConfig]:
    """Load project configuration.

    Args:
        path: Explicit config file. When omitted, ``./openapi-typegen.json``
            is used if it exists.

    Returns:
        The validated config, or ``None`` when no default file exists.

    Raises:
        ConfigError: If an explicit *path* does not exist, or the file holds
            invalid JSON or unknown / invalid options.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        config_path = Path.cwd() / _PROJECT_CONFIG_FILENAME
        if not config_path.is_file():
            return None

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {config_path}: expected a JSON object")
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, (field, enum_type) in _ENV_OPTIONS.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        try:
            overrides[field] = enum_type(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(m.value for m in enum_type)
            raise ConfigError(
                f"Invalid value for {var}: {raw!r} (expected one of: {allowed})"
            ) from exc
    return overrides


# --- Precedence resolution ---


def resolve_options(
    cli_overrides: Optional[dict[str, Any]] = None,
    config_path: Optional[str | Path] = None,
) -> GenerateOptions:
    """Resolve generation options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (*cli_overrides*; ``None`` values mean "not given")
        2. Environment variables (``OPENAPI_TYPEGEN_SPLIT``,
           ``OPENAPI_TYPEGEN_PROPERTY_NAMING``, ``OPENAPI_TYPEGEN_LOG_LEVEL``)
        3. Project config (``./openapi-typegen.json`` or *config_path*)
        4. Defaults

    Raises:
        ConfigError: On an invalid config file or environment value.
    """
    merged: dict[str, Any] = {}

    project = load_project_config(config_path)
    if project is not None:
        merged.update(project.model_dump(exclude_none=True))

    merged.update(_env_overrides())

    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return GenerateOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid options: {exc}") from exc
