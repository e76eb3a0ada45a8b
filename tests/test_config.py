# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered catalog configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from carcatalog.config import CatalogConfig, ConfigError, load_config


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg = load_config(search_dir=tmp_path, env={})

    assert cfg == CatalogConfig()
    assert cfg.page_size == 50
    assert cfg.resolved_index_path() == Path("search-index") / "cars"


def test_load_config_reads_catalog_file(tmp_path: Path) -> None:
    (tmp_path / "carcatalog.toml").write_text(
        """
[carcatalog]
install-path = "server"
page_size = 20
""".strip(),
        encoding="utf-8",
    )

    cfg = load_config(search_dir=tmp_path, env={})

    assert cfg.install_path == tmp_path / "server"
    assert cfg.page_size == 20
    assert cfg.resolved_index_path() == tmp_path / "server" / "search-index" / "cars"


def test_load_config_reads_pyproject_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
[project]
name = "demo"

[tool.carcatalog]
index_path = "/var/lib/catalog"
""".strip(),
        encoding="utf-8",
    )

    cfg = load_config(search_dir=tmp_path, env={})

    assert cfg.index_path == Path("/var/lib/catalog")


def test_pyproject_without_section_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")

    assert load_config(search_dir=tmp_path, env={}) == CatalogConfig()


def test_environment_and_overrides_take_precedence(tmp_path: Path) -> None:
    (tmp_path / "carcatalog.toml").write_text("page_size = 20\n", encoding="utf-8")
    env = {"CARCATALOG_PAGE_SIZE": "30", "CARCATALOG_DEFAULT_SKIN_URL": "/none.png"}

    from_env = load_config(search_dir=tmp_path, env=env)
    overridden = load_config(search_dir=tmp_path, env=env, overrides={"page_size": 40, "install_path": None})

    assert from_env.page_size == 30
    assert from_env.default_skin_url == "/none.png"
    assert overridden.page_size == 40
    assert overridden.install_path == Path(".")


def test_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.toml", env={})


@pytest.mark.parametrize(
    "content",
    [
        "page_size = 0\n",
        "unknown_option = true\n",
        "[carcatalog\n",
    ],
)
def test_invalid_configuration_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "carcatalog.toml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path, env={})


def test_config_validates_assignment() -> None:
    cfg = CatalogConfig()

    with pytest.raises(ValueError):
        cfg.page_size = 0
