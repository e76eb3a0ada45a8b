# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Keep the car store and its search index in step."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

from .config import CatalogConfig
from .constants import SEARCH_PAGE_SIZE
from .details import CarDetails
from .models import Car, TyreRegistry
from .results import SessionResultsLike, results_for_car
from .search import CarSearchIndex, check_deadline
from .store import CarStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchPage:
    """A page of search results hydrated into full car records."""

    term: str
    page: int
    page_size: int
    total: int
    cars: dict[str, Car] = field(default_factory=dict)

    @property
    def num_pages(self) -> int:
        """Return the number of pages needed to show every match."""

        return math.ceil(self.total / self.page_size)


class CarManager:
    """Mirror every car mutation into the search index and serve searches.

    Store writes happen first; a failing index write afterwards propagates
    without undoing the filesystem change. :meth:`index_all_cars` rebuilds
    the index from disk and is the repair path for such divergence.
    """

    def __init__(self, store: CarStore, index_path: Path, *, page_size: int = SEARCH_PAGE_SIZE) -> None:
        """Create a manager over ``store`` whose index lives at ``index_path``.

        Args:
            store: Filesystem store holding the cars.
            index_path: Directory of the tantivy index.
            page_size: Number of hits per search page.
        """

        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.store = store
        self.index_path = index_path
        self.page_size = page_size
        self._index: CarSearchIndex | None = None

    @classmethod
    def from_config(cls, config: CatalogConfig) -> CarManager:
        """Build a manager from a resolved :class:`CatalogConfig`."""

        store = CarStore(config.install_path, default_skin_url=config.default_skin_url)
        return cls(store, config.resolved_index_path(), page_size=config.page_size)

    def __enter__(self) -> CarManager:
        self.open_index()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def index(self) -> CarSearchIndex:
        """Return the open search index, opening it on first use."""

        if self._index is None or not self._index.is_open:
            return self.open_index()
        return self._index

    def open_index(self) -> CarSearchIndex:
        """Open the search index, building it from disk when newly created.

        A failed initial build deletes the new index again, so the next open
        starts from scratch instead of finding an empty index.

        Returns:
            CarSearchIndex: The opened index handle.
        """

        index, created = CarSearchIndex.open_or_create(self.index_path)
        self._index = index
        if created:
            try:
                self.index_all_cars()
            except BaseException:
                LOGGER.error("Initial build of search index %s failed, discarding it", self.index_path)
                self._index = None
                index.destroy()
                raise
        return index

    def close(self) -> None:
        """Close the search index handle."""

        if self._index is not None:
            self._index.close()
            self._index = None

    def list_cars(self, tyres: TyreRegistry | None = None) -> list[Car]:
        """Return every car ordered by display name."""

        return self.store.list_cars(tyres)

    def load_car(self, name: str, tyres: TyreRegistry | None = None) -> Car:
        """Load a single car from disk."""

        return self.store.load_car(name, tyres)

    def index_car(self, car: Car) -> None:
        """Index the details of ``car``."""

        self.index.put(car.name, car.details)

    def deindex_car(self, name: str) -> None:
        """Remove ``name`` from the search index."""

        self.index.remove(name)

    def index_all_cars(self) -> int:
        """Rebuild the search index from every car on disk.

        Returns:
            int: Number of cars indexed.
        """

        LOGGER.info("Building search index for all cars")
        cars = self.store.list_cars()
        count = self.index.replace_all((car.name, car.details) for car in cars)
        LOGGER.info("Search index build is complete (%d cars)", count)
        return count

    def save_car_details(self, name: str, details: CarDetails) -> None:
        """Persist ``details`` for ``name`` and index them."""

        self.store.save_details(name, details)
        self.index.put(name, details)

    def add_tag(self, name: str, tag: str) -> Car:
        """Add ``tag`` to ``name`` and reindex the car."""

        car = self.store.add_tag(name, tag)
        self.index_car(car)
        return car

    def remove_tag(self, name: str, tag: str) -> Car:
        """Remove ``tag`` from ``name`` and reindex the car."""

        car = self.store.remove_tag(name, tag)
        self.index_car(car)
        return car

    def update_car_metadata(self, name: str, *, notes: str, download_url: str) -> Car:
        """Update the operator-local fields of ``name`` and reindex the car."""

        car = self.store.update_metadata(name, notes=notes, download_url=download_url)
        self.index_car(car)
        return car

    def delete_car(self, name: str) -> bool:
        """Delete ``name`` from disk, then always drop it from the index.

        Returns:
            bool: ``True`` when files were removed from disk.
        """

        removed = self.store.delete_car(name)
        self.deindex_car(name)
        return removed

    def search(self, term: str = "", page: int = 0, *, deadline: float | None = None) -> SearchPage:
        """Run a paginated search and hydrate each hit from disk.

        Args:
            term: Free-text query; blank matches every car.
            page: Zero-based page number; negative values are treated as 0.
            deadline: Optional :func:`time.monotonic` deadline.

        Returns:
            SearchPage: Matches for ``page`` keyed by car name in rank order.
        """

        page = max(page, 0)
        hits = self.index.query(term, limit=self.page_size, offset=page * self.page_size, deadline=deadline)
        cars: dict[str, Car] = {}
        for name in hits.ids:
            check_deadline(deadline)
            cars[name] = self.store.load_car(name)
        return SearchPage(term=term, page=page, page_size=self.page_size, total=hits.total, cars=cars)

    def results_for_car(
        self,
        name: str,
        results: Iterable[SessionResultsLike],
    ) -> list[SessionResultsLike]:
        """Return the session results in which ``name`` took part."""

        return results_for_car(name, results)


__all__ = ["CarManager", "SearchPage"]
