# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filter externally supplied session results by car."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar


class DriverResultLike(Protocol):
    """Single driver row of a session result carrying the car model."""

    @property
    def car_model(self) -> str:
        """Return the directory name of the car driven."""
        ...


class SessionResultsLike(Protocol):
    """Session result exposing its driver rows."""

    @property
    def result(self) -> Sequence[DriverResultLike]:
        """Return the driver rows of the session."""
        ...


SessionResultsT = TypeVar("SessionResultsT", bound=SessionResultsLike)


@dataclass(frozen=True, slots=True)
class SessionDriverResult:
    """Driver row as written to a session results file."""

    driver_name: str
    car_model: str
    best_lap: int = 0
    total_time: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> SessionDriverResult:
        """Build a driver row from a ``Result`` entry of a results JSON file."""

        return cls(
            driver_name=str(data.get("DriverName", "")),
            car_model=str(data.get("CarModel", "")),
            best_lap=_as_int(data.get("BestLap")),
            total_time=_as_int(data.get("TotalTime")),
        )


@dataclass(frozen=True, slots=True)
class SessionResults:
    """Results of one session as supplied by the results source."""

    track_name: str
    session_type: str
    result: tuple[SessionDriverResult, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> SessionResults:
        """Build session results from a decoded results JSON document."""

        rows = data.get("Result")
        entries = rows if isinstance(rows, list) else []
        return cls(
            track_name=str(data.get("TrackName", "")),
            session_type=str(data.get("Type", "")),
            result=tuple(SessionDriverResult.from_mapping(row) for row in entries if isinstance(row, Mapping)),
        )


def _as_int(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def results_for_car(car: str, results: Iterable[SessionResultsT]) -> list[SessionResultsT]:
    """Return the sessions in which at least one driver used ``car``.

    Args:
        car: Directory name of the car.
        results: Complete set of session results to scan.

    Returns:
        list[SessionResultsT]: Matching sessions in their original order.
    """

    return [session for session in results if any(driver.car_model == car for driver in session.result)]


__all__ = [
    "DriverResultLike",
    "SessionDriverResult",
    "SessionResults",
    "SessionResultsLike",
    "results_for_car",
]
