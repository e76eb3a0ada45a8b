# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Persistent tantivy full-text index over car details."""

from __future__ import annotations

import logging
import shutil
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import tantivy

from .details import CarDetails, parse_details, serialize_details
from .errors import SearchCancelledError, SearchIndexError, SearchQueryError

LOGGER = logging.getLogger(__name__)

ID_FIELD: Final[str] = "id"
DOCUMENT_FIELD: Final[str] = "document"
TEXT_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "author",
    "brand",
    "class",
    "country",
    "description",
    "specs",
    "tags",
    "url",
    "version",
    "notes",
    "download_url",
)
INTEGER_FIELDS: Final[tuple[str, ...]] = (
    "year",
    "acceleration",
    "bhp",
    "pwratio",
    "topspeed",
    "torque",
    "weight",
)
WRITER_HEAP_SIZE: Final[int] = 50_000_000
_BACKEND_ERRORS: Final[tuple[type[Exception], ...]] = (ValueError, OverflowError, TypeError)


@dataclass(frozen=True, slots=True)
class SearchHits:
    """One page of search results."""

    total: int
    ids: tuple[str, ...]


def build_schema() -> tantivy.Schema:
    """Return the tantivy schema used for car documents."""

    builder = tantivy.SchemaBuilder()
    builder.add_text_field(ID_FIELD, stored=True, tokenizer_name="raw")
    for name in TEXT_FIELDS:
        builder.add_text_field(name, stored=False, index_option="position")
    for name in INTEGER_FIELDS:
        builder.add_integer_field(name, stored=False, indexed=True, fast=True)
    builder.add_bytes_field(DOCUMENT_FIELD, stored=True)
    return builder.build()


def check_deadline(deadline: float | None) -> None:
    """Raise when ``deadline`` (a :func:`time.monotonic` value) has passed.

    Raises:
        SearchCancelledError: If the deadline is in the past.
    """

    if deadline is not None and time.monotonic() >= deadline:
        raise SearchCancelledError("search deadline exceeded")


def _build_document(name: str, details: CarDetails) -> tantivy.Document:
    document = tantivy.Document()
    document.add_text(ID_FIELD, name)
    for field_name, value in (
        ("name", details.name),
        ("author", details.author),
        ("brand", details.brand),
        ("class", details.car_class),
        ("country", details.country),
        ("description", details.description),
        ("specs", details.specs_full.text()),
        ("url", details.url),
        ("version", details.version),
        ("notes", details.notes),
        ("download_url", details.download_url),
    ):
        if value:
            document.add_text(field_name, value)
    for tag in details.tags:
        document.add_text("tags", tag)

    numeric = details.specs_full.numeric()
    document.add_integer("year", details.year)
    document.add_integer("acceleration", numeric.acceleration)
    document.add_integer("bhp", numeric.bhp)
    document.add_integer("pwratio", numeric.pwratio)
    document.add_integer("topspeed", numeric.topspeed)
    document.add_integer("torque", numeric.torque)
    document.add_integer("weight", numeric.weight)
    document.add_bytes(DOCUMENT_FIELD, serialize_details(details))
    return document


class CarSearchIndex:
    """Handle to an on-disk tantivy index keyed by car name.

    Writes are serialised through an internal lock and committed
    immediately; readers always search the latest committed state.
    """

    def __init__(self, path: Path, index: tantivy.Index) -> None:
        """Wrap an opened tantivy ``index`` stored at ``path``."""

        self.path = path
        self._index: tantivy.Index | None = index
        self._lock = threading.Lock()

    @classmethod
    def open_or_create(cls, path: Path) -> tuple[CarSearchIndex, bool]:
        """Open the index stored at ``path`` or create an empty one.

        Args:
            path: Directory holding the index files.

        Returns:
            tuple[CarSearchIndex, bool]: The index handle and ``True`` when the
            index was newly created and needs a full rebuild.

        Raises:
            SearchIndexError: If the index cannot be opened or created.
        """

        try:
            path.mkdir(parents=True, exist_ok=True)
            if tantivy.Index.exists(str(path)):
                return cls(path, tantivy.Index.open(str(path))), False
            LOGGER.info("Creating car search index at %s", path)
            return cls(path, tantivy.Index(build_schema(), path=str(path))), True
        except (OSError, ValueError) as exc:
            raise SearchIndexError(f"{path}: unable to open search index") from exc

    @property
    def is_open(self) -> bool:
        """Return ``True`` until :meth:`close` is called."""

        return self._index is not None

    def close(self) -> None:
        """Release the index handle; later calls raise :class:`SearchIndexError`."""

        with self._lock:
            self._index = None

    def destroy(self) -> None:
        """Close the handle and delete every file of the index directory.

        Raises:
            SearchIndexError: If the directory cannot be removed.
        """

        self.close()
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise SearchIndexError(f"{self.path}: unable to remove search index") from exc
        LOGGER.info("Removed car search index at %s", self.path)

    def _require_index(self) -> tantivy.Index:
        if self._index is None:
            raise SearchIndexError(f"{self.path}: search index is closed")
        return self._index

    @contextmanager
    def _writer(self) -> Iterator[tantivy.IndexWriter]:
        with self._lock:
            index = self._require_index()
            try:
                writer = index.writer(heap_size=WRITER_HEAP_SIZE, num_threads=1)
            except ValueError as exc:
                raise SearchIndexError(f"{self.path}: unable to acquire index writer") from exc
            try:
                yield writer
                writer.commit()
            except _BACKEND_ERRORS as exc:
                writer.rollback()
                raise SearchIndexError(f"{self.path}: index write failed") from exc
            except BaseException:
                writer.rollback()
                raise
            finally:
                writer.wait_merging_threads()
            index.reload()

    def put(self, name: str, details: CarDetails) -> None:
        """Index ``details`` under ``name``, replacing any previous document."""

        self.put_many(((name, details),))

    def put_many(self, items: Iterable[tuple[str, CarDetails]]) -> int:
        """Index several documents in a single commit.

        Returns:
            int: Number of documents written.
        """

        count = 0
        with self._writer() as writer:
            for name, details in items:
                writer.delete_documents_by_term(ID_FIELD, name)
                writer.add_document(_build_document(name, details))
                count += 1
        return count

    def replace_all(self, items: Iterable[tuple[str, CarDetails]]) -> int:
        """Drop every document and index ``items`` in their place atomically.

        Returns:
            int: Number of documents written.
        """

        count = 0
        with self._writer() as writer:
            writer.delete_all_documents()
            for name, details in items:
                writer.add_document(_build_document(name, details))
                count += 1
        return count

    def remove(self, name: str) -> None:
        """Delete the document stored under ``name``; absence is ignored."""

        with self._writer() as writer:
            writer.delete_documents_by_term(ID_FIELD, name)

    def clear(self) -> None:
        """Delete every document in the index."""

        with self._writer() as writer:
            writer.delete_all_documents()

    def document_count(self) -> int:
        """Return the number of live documents."""

        return self._require_index().searcher().num_docs

    def get(self, name: str) -> CarDetails | None:
        """Return the details indexed under ``name``, or ``None``."""

        index = self._require_index()
        query = tantivy.Query.term_query(index.schema, ID_FIELD, name)
        searcher = index.searcher()
        result = searcher.search(query, limit=1)
        if not result.hits:
            return None
        _score, address = result.hits[0]
        raw = searcher.doc(address).get_first(DOCUMENT_FIELD)
        if raw is None:
            return None
        return parse_details(bytes(raw), source=f"index:{name}")

    def query(
        self,
        term: str,
        *,
        limit: int,
        offset: int = 0,
        deadline: float | None = None,
    ) -> SearchHits:
        """Search the index.

        A blank ``term`` matches every document in index order; any other
        term goes through tantivy's query-string parser over the text fields
        and is ranked by relevance. Field syntax such as ``brand:ferrari`` or
        ``bhp:[400 TO 600]`` is supported.

        Args:
            term: Free-text query string.
            limit: Maximum number of hits to return.
            offset: Number of ranked hits to skip.
            deadline: Optional :func:`time.monotonic` deadline.

        Returns:
            SearchHits: Total match count and the identities on this page.

        Raises:
            SearchQueryError: If ``term`` is not valid query syntax.
            SearchCancelledError: If ``deadline`` passes.
            SearchIndexError: If the backend fails.
        """

        if limit < 1:
            raise ValueError("limit must be at least 1")
        index = self._require_index()
        check_deadline(deadline)

        if term.strip():
            try:
                query = index.parse_query(term, list(TEXT_FIELDS))
            except ValueError as exc:
                raise SearchQueryError(f"invalid search query: {term!r}") from exc
        else:
            query = tantivy.Query.all_query()

        searcher = index.searcher()
        try:
            result = searcher.search(query, limit=limit, count=True, offset=max(offset, 0))
            ids = tuple(searcher.doc(address).get_first(ID_FIELD) for _score, address in result.hits)
        except _BACKEND_ERRORS as exc:
            raise SearchIndexError(f"{self.path}: search failed") from exc
        check_deadline(deadline)
        return SearchHits(total=result.count or 0, ids=ids)


__all__ = [
    "CarSearchIndex",
    "INTEGER_FIELDS",
    "SearchHits",
    "TEXT_FIELDS",
    "build_schema",
    "check_deadline",
]
