# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem layout and search constants shared across the catalog."""

from __future__ import annotations

from typing import Final

CONTENT_DIR_NAME: Final[str] = "content"
CARS_DIR_NAME: Final[str] = "cars"
SKINS_DIR_NAME: Final[str] = "skins"
UI_DIR_NAME: Final[str] = "ui"
DETAILS_FILENAME: Final[str] = "ui_car.json"
SKIN_PREVIEW_FILENAME: Final[str] = "preview.jpg"

SEARCH_INDEX_DIR_NAME: Final[str] = "search-index"
SEARCH_PAGE_SIZE: Final[int] = 50

DEFAULT_SKIN_URL: Final[str] = "/static/img/no-preview-car.png"

__all__ = [
    "CARS_DIR_NAME",
    "CONTENT_DIR_NAME",
    "DEFAULT_SKIN_URL",
    "DETAILS_FILENAME",
    "SEARCH_INDEX_DIR_NAME",
    "SEARCH_PAGE_SIZE",
    "SKINS_DIR_NAME",
    "SKIN_PREVIEW_FILENAME",
    "UI_DIR_NAME",
]
