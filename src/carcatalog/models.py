# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""In-memory representation of catalog entries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from .details import CarDetails
from .names import prettify_name

TyreRegistry: TypeAlias = Mapping[str, Mapping[str, str]]


@dataclass(slots=True)
class Car:
    """A car discovered under ``content/cars``.

    ``skins`` and ``tyres`` are derived from the filesystem and the external
    tyre registry on every load; only ``details`` is persisted.
    """

    name: str
    skins: list[str] = field(default_factory=list)
    tyres: dict[str, str] = field(default_factory=dict)
    details: CarDetails = field(default_factory=CarDetails)

    @property
    def pretty_name(self) -> str:
        """Return the prettified form of the car's directory name."""

        return prettify_name(self.name)


def cars_as_map(cars: Iterable[Car]) -> dict[str, list[str]]:
    """Return a mapping of car names to their skin lists."""

    return {car.name: list(car.skins) for car in cars}


__all__ = ["Car", "TyreRegistry", "cars_as_map"]
