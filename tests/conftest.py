# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from carcatalog.manager import CarManager
from carcatalog.store import CarStore

MakeCar = Callable[..., Path]


@pytest.fixture
def install_path(tmp_path: Path) -> Path:
    """Return an empty server install directory."""

    root = tmp_path / "server"
    (root / "content" / "cars").mkdir(parents=True)
    return root


@pytest.fixture
def make_car(install_path: Path) -> MakeCar:
    """Return a helper creating a car directory under ``install_path``."""

    def _make_car(
        name: str,
        skins: Sequence[str] = ("default",),
        details: dict[str, Any] | None = None,
        *,
        raw_details: bytes | None = None,
    ) -> Path:
        car_dir = install_path / "content" / "cars" / name
        (car_dir / "skins").mkdir(parents=True)
        for skin in skins:
            (car_dir / "skins" / skin).mkdir()
        if details is not None or raw_details is not None:
            ui_dir = car_dir / "ui"
            ui_dir.mkdir()
            payload = raw_details if raw_details is not None else json.dumps(details).encode("utf-8")
            (ui_dir / "ui_car.json").write_bytes(payload)
        return car_dir

    return _make_car


@pytest.fixture
def store(install_path: Path) -> CarStore:
    """Return a store rooted at ``install_path``."""

    return CarStore(install_path)


@pytest.fixture
def manager(store: CarStore, tmp_path: Path) -> Iterator[CarManager]:
    """Return an opened manager whose index lives beside the install."""

    with CarManager(store, tmp_path / "index") as opened:
        yield opened
