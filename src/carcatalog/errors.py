# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by car catalog operations."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for failures raised by the car catalog."""


class CarNotFoundError(CatalogError, FileNotFoundError):
    """Raised when a car or its skins directory does not exist on disk."""

    def __init__(self, name: str, *, message: str | None = None) -> None:
        """Create the error for the car identified by ``name``.

        Args:
            name: Directory name of the car that could not be found.
            message: Optional override for the default message.
        """

        super().__init__(message or f"car not found: {name}")
        self.name = name


class DetailsParseError(CatalogError):
    """Raised when a ``ui_car.json`` document cannot be decoded at all."""


class SearchIndexError(CatalogError):
    """Raised when the search backend fails to read or write the index."""


class SearchQueryError(SearchIndexError):
    """Raised when a free-text query cannot be parsed by the search backend."""


class SearchCancelledError(CatalogError):
    """Raised when a search passes its caller-supplied deadline."""


__all__ = (
    "CarNotFoundError",
    "CatalogError",
    "DetailsParseError",
    "SearchCancelledError",
    "SearchIndexError",
    "SearchQueryError",
)
