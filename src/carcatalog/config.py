# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalog configuration models and layered loading."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import CARS_DIR_NAME, DEFAULT_SKIN_URL, SEARCH_INDEX_DIR_NAME, SEARCH_PAGE_SIZE

CONFIG_FILENAME: Final[str] = "carcatalog.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "carcatalog"
ENV_PREFIX: Final[str] = "CARCATALOG_"
ENV_FIELDS: Final[tuple[str, ...]] = ("install_path", "index_path", "page_size", "default_skin_url")
PATH_FIELDS: Final[tuple[str, ...]] = ("install_path", "index_path")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class CatalogConfig(BaseModel):
    """Locations and presentation settings for a car catalog."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    install_path: Path = Field(default_factory=lambda: Path("."))
    index_path: Path | None = None
    page_size: int = Field(default=SEARCH_PAGE_SIZE, ge=1)
    default_skin_url: str = DEFAULT_SKIN_URL

    def resolved_index_path(self) -> Path:
        """Return ``index_path`` or the default ``search-index/cars`` location."""

        if self.index_path is not None:
            return self.index_path
        return self.install_path / SEARCH_INDEX_DIR_NAME / CARS_DIR_NAME


def _normalise_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def _resolve_paths(data: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    for key in PATH_FIELDS:
        value = data.get(key)
        if isinstance(value, str):
            path = Path(value).expanduser()
            data[key] = path if path.is_absolute() else base_dir / path
    return data


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc


def _load_file_section(path: Path) -> dict[str, Any]:
    document = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        tool_section = document.get(PYPROJECT_TOOL_KEY)
        section = tool_section.get(PYPROJECT_SECTION_KEY) if isinstance(tool_section, Mapping) else None
        if section is None:
            return {}
    else:
        section = document.get(PYPROJECT_SECTION_KEY, document)
    if not isinstance(section, Mapping):
        raise ConfigError(f"{path}: [{PYPROJECT_SECTION_KEY}] must be a table")
    return _resolve_paths(_normalise_keys(section), path.parent)


def _discover_config_file(search_dir: Path) -> Path | None:
    for candidate in (search_dir / CONFIG_FILENAME, search_dir / PYPROJECT_FILENAME):
        if candidate.is_file():
            return candidate
    return None


def _load_env(env: Mapping[str, str]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key in ENV_FIELDS:
        value = env.get(f"{ENV_PREFIX}{key.upper()}")
        if value:
            data[key] = value
    return data


def load_config(
    path: Path | None = None,
    *,
    search_dir: Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CatalogConfig:
    """Resolve catalog configuration from defaults, files, environment and overrides.

    Later layers win: built-in defaults, then ``path`` (or the first of
    ``carcatalog.toml`` and ``pyproject.toml`` found in ``search_dir``), then
    ``CARCATALOG_*`` environment variables, then explicit ``overrides``.

    Args:
        path: Explicit configuration file; must exist when given.
        search_dir: Directory searched for configuration files when ``path``
            is omitted. Defaults to the current working directory.
        env: Environment mapping; defaults to :data:`os.environ`.
        overrides: Values supplied programmatically, e.g. from CLI flags.
            ``None`` entries are ignored.

    Returns:
        CatalogConfig: Validated configuration.

    Raises:
        ConfigError: If a file is missing or malformed or a value is invalid.
    """

    data: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"configuration file not found: {path}")
        config_file: Path | None = path
    else:
        config_file = _discover_config_file(search_dir or Path.cwd())
    if config_file is not None:
        data.update(_load_file_section(config_file))
    data.update(_load_env(os.environ if env is None else env))
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return CatalogConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = ["CONFIG_FILENAME", "CatalogConfig", "ConfigError", "load_config"]
