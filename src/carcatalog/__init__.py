# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Car content catalog backed by the filesystem with a synchronized search index."""

from __future__ import annotations

from importlib import metadata

from .details import CarDetails, CarSpecs, CarSpecsNumeric, extract_leading_integer, parse_details, serialize_details
from .errors import (
    CarNotFoundError,
    CatalogError,
    DetailsParseError,
    SearchCancelledError,
    SearchIndexError,
    SearchQueryError,
)
from .manager import CarManager, SearchPage
from .models import Car
from .names import prettify_name
from .search import CarSearchIndex, SearchHits
from .store import CarStore

__all__ = [
    "Car",
    "CarDetails",
    "CarManager",
    "CarNotFoundError",
    "CarSearchIndex",
    "CarSpecs",
    "CarSpecsNumeric",
    "CarStore",
    "CatalogError",
    "DetailsParseError",
    "SearchCancelledError",
    "SearchHits",
    "SearchIndexError",
    "SearchPage",
    "SearchQueryError",
    "__version__",
    "extract_leading_integer",
    "parse_details",
    "prettify_name",
    "serialize_details",
]

try:
    __version__ = metadata.version("carcatalog")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
