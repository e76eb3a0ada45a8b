# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem-backed store for cars under ``content/cars``."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from operator import attrgetter
from pathlib import Path, PurePosixPath

from .constants import (
    CARS_DIR_NAME,
    CONTENT_DIR_NAME,
    DEFAULT_SKIN_URL,
    DETAILS_FILENAME,
    SKIN_PREVIEW_FILENAME,
    SKINS_DIR_NAME,
    UI_DIR_NAME,
)
from .details import CarDetails, read_details, write_details
from .errors import CarNotFoundError
from .models import Car, TyreRegistry
from .names import prettify_name

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CarStore:
    """Read and write cars stored beneath a server install directory.

    Every listing and load is derived from the current filesystem state;
    nothing is cached between calls.
    """

    install_path: Path
    default_skin_url: str = DEFAULT_SKIN_URL

    @property
    def cars_root(self) -> Path:
        """Return the ``content/cars`` directory."""

        return self.install_path / CONTENT_DIR_NAME / CARS_DIR_NAME

    def car_path(self, name: str) -> Path:
        """Return the directory holding the car called ``name``.

        Raises:
            CarNotFoundError: If ``name`` is not a single path component.
        """

        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            raise CarNotFoundError(name, message=f"invalid car name: {name!r}")
        return self.cars_root / name

    def skins_path(self, name: str) -> Path:
        """Return the ``skins`` directory of ``name``."""

        return self.car_path(name) / SKINS_DIR_NAME

    def details_path(self, name: str) -> Path:
        """Return the ``ui/ui_car.json`` path of ``name``."""

        return self.car_path(name) / UI_DIR_NAME / DETAILS_FILENAME

    def list_cars(self, tyres: TyreRegistry | None = None) -> list[Car]:
        """Return every car on disk ordered by display name.

        Directories without a ``skins`` folder are skipped. A missing
        ``content/cars`` directory is an empty catalog.

        Args:
            tyres: Optional tyre registry keyed by car name.

        Returns:
            list[Car]: Cars sorted by :attr:`Car.pretty_name`.
        """

        try:
            entries = sorted(self.cars_root.iterdir())
        except FileNotFoundError:
            LOGGER.warning("Car content directory %s does not exist", self.cars_root)
            return []

        cars: list[Car] = []
        for entry in entries:
            if not entry.is_dir():
                continue
            try:
                car = self.load_car(entry.name, tyres)
            except CarNotFoundError:
                LOGGER.debug("Skipping %s: no skins directory", entry.name)
                continue
            cars.append(car)
        cars.sort(key=attrgetter("pretty_name"))
        return cars

    def load_car(self, name: str, tyres: TyreRegistry | None = None) -> Car:
        """Load a single car, its skins and its details document.

        A missing details document yields details holding only the
        prettified name.

        Args:
            name: Directory name of the car.
            tyres: Optional tyre registry; ``None`` leaves ``Car.tyres`` empty.

        Returns:
            Car: Hydrated car record.

        Raises:
            CarNotFoundError: If the car's ``skins`` directory is missing.
            DetailsParseError: If ``ui_car.json`` is structurally corrupt.
        """

        skins_dir = self.skins_path(name)
        try:
            entries = list(skins_dir.iterdir())
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise CarNotFoundError(name) from exc
        skins = sorted(entry.name for entry in entries if entry.is_dir())

        try:
            details = read_details(self.details_path(name))
        except FileNotFoundError:
            details = CarDetails(name=prettify_name(name))

        return Car(
            name=name,
            skins=skins,
            tyres=dict(tyres.get(name, {})) if tyres else {},
            details=details,
        )

    def save_details(self, name: str, details: CarDetails) -> None:
        """Persist ``details`` for ``name``, creating the ``ui`` directory."""

        write_details(self.details_path(name), details)

    def is_listed(self, name: str) -> bool:
        """Return ``True`` when ``name`` would appear in :meth:`list_cars`."""

        try:
            return self.skins_path(name).is_dir()
        except CarNotFoundError:
            return False

    def delete_car(self, name: str) -> bool:
        """Remove the whole directory tree of ``name``.

        Returns:
            bool: ``True`` when a listed car was removed, ``False`` when there
            was nothing to remove.
        """

        if not self.is_listed(name):
            LOGGER.debug("Car %s is not in the catalog, nothing to remove", name)
            return False
        shutil.rmtree(self.car_path(name))
        LOGGER.info("Removed car %s from %s", name, self.cars_root)
        return True

    def add_tag(self, name: str, tag: str) -> Car:
        """Add ``tag`` to the car's details and persist them."""

        car = self.load_car(name)
        car.details.add_tag(tag)
        self.save_details(name, car.details)
        return car

    def remove_tag(self, name: str, tag: str) -> Car:
        """Remove ``tag`` from the car's details and persist them."""

        car = self.load_car(name)
        car.details.remove_tag(tag)
        self.save_details(name, car.details)
        return car

    def update_metadata(self, name: str, *, notes: str, download_url: str) -> Car:
        """Set the operator-local ``notes`` and ``download_url`` fields."""

        car = self.load_car(name)
        car.details.notes = notes
        car.details.download_url = download_url
        self.save_details(name, car.details)
        return car

    def skin_url(self, car: str, skin: str) -> str:
        """Return the preview image URL of ``skin``, or the default image.

        Args:
            car: Directory name of the car.
            skin: Directory name of the skin.

        Returns:
            str: Site-absolute URL of ``preview.jpg`` when it exists on disk,
            otherwise :attr:`default_skin_url`.
        """

        relative = PurePosixPath(CONTENT_DIR_NAME, CARS_DIR_NAME, car, SKINS_DIR_NAME, skin, SKIN_PREVIEW_FILENAME)
        if not (self.install_path / relative).exists():
            return self.default_skin_url
        return "/" + relative.as_posix()


__all__ = ["CarStore"]
