# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the tantivy-backed car search index."""

from __future__ import annotations

import time
from collections.abc import Iterator
from pathlib import Path

import pytest

from carcatalog.details import CarDetails
from carcatalog.errors import SearchCancelledError, SearchIndexError, SearchQueryError
from carcatalog.search import CarSearchIndex


@pytest.fixture
def index(tmp_path: Path) -> Iterator[CarSearchIndex]:
    opened, created = CarSearchIndex.open_or_create(tmp_path / "index")
    assert created is True
    yield opened
    opened.close()


def _details(name: str, **fields: object) -> CarDetails:
    return CarDetails.model_validate({"name": name, **fields})


def test_put_then_query_by_text_and_field(index: CarSearchIndex) -> None:
    index.put("ks_ferrari_488", _details("Ferrari 488 GT3", brand="Ferrari", tags=["gt3"]))
    index.put("ks_audi_r8", _details("Audi R8 LMS", brand="Audi", tags=["gt3"]))

    ferrari = index.query("ferrari", limit=10)
    gt3 = index.query("tags:gt3", limit=10)

    assert ferrari.ids == ("ks_ferrari_488",)
    assert ferrari.total == 1
    assert set(gt3.ids) == {"ks_ferrari_488", "ks_audi_r8"}


def test_put_replaces_previous_document(index: CarSearchIndex) -> None:
    index.put("car_a", _details("First Name"))
    index.put("car_a", _details("Second Name"))

    assert index.document_count() == 1
    assert index.query("first", limit=10).total == 0
    assert index.query("second", limit=10).ids == ("car_a",)


def test_blank_term_matches_everything(index: CarSearchIndex) -> None:
    index.put_many((f"car_{number}", _details(f"Car {number}")) for number in range(3))

    hits = index.query("   ", limit=10)

    assert hits.total == 3
    assert sorted(hits.ids) == ["car_0", "car_1", "car_2"]


def test_query_paginates_with_offset(index: CarSearchIndex) -> None:
    index.put_many((f"car_{number:03d}", _details(f"Car {number}")) for number in range(125))

    first = index.query("", limit=50)
    last = index.query("", limit=50, offset=100)

    assert first.total == 125
    assert len(first.ids) == 50
    assert last.total == 125
    assert len(last.ids) == 25
    assert not set(first.ids) & set(last.ids)


def test_remove_and_clear(index: CarSearchIndex) -> None:
    index.put_many([("car_a", _details("A")), ("car_b", _details("B"))])

    index.remove("car_a")
    index.remove("never_indexed")

    assert index.query("", limit=10).ids == ("car_b",)
    index.clear()
    assert index.document_count() == 0


def test_replace_all_drops_orphans(index: CarSearchIndex) -> None:
    index.put("orphan", _details("Orphan"))

    written = index.replace_all([("car_a", _details("A"))])

    assert written == 1
    assert index.query("", limit=10).ids == ("car_a",)


def test_get_returns_stored_details(index: CarSearchIndex) -> None:
    index.put("car_a", _details("Car A", brand="Brand", specs={"bhp": "300bhp"}))

    stored = index.get("car_a")

    assert stored is not None
    assert stored.brand == "Brand"
    assert stored.specs.bhp == 300
    assert index.get("missing") is None


def test_invalid_query_raises(index: CarSearchIndex) -> None:
    index.put("car_a", _details("Car A"))

    with pytest.raises(SearchQueryError):
        index.query("year:notanumber", limit=10)


def test_query_limit_must_be_positive(index: CarSearchIndex) -> None:
    with pytest.raises(ValueError):
        index.query("", limit=0)


def test_expired_deadline_cancels_search(index: CarSearchIndex) -> None:
    index.put("car_a", _details("Car A"))

    with pytest.raises(SearchCancelledError):
        index.query("", limit=10, deadline=time.monotonic() - 1)


def test_reopen_keeps_documents(tmp_path: Path) -> None:
    path = tmp_path / "index"
    first, _created = CarSearchIndex.open_or_create(path)
    first.put("car_a", _details("Car A"))
    first.close()

    reopened, created = CarSearchIndex.open_or_create(path)

    assert created is False
    assert reopened.query("", limit=10).ids == ("car_a",)


def test_closed_index_raises(index: CarSearchIndex) -> None:
    index.close()

    assert index.is_open is False
    with pytest.raises(SearchIndexError):
        index.query("", limit=10)


def test_oversized_specs_are_indexed(index: CarSearchIndex) -> None:
    index.put("odd_car", _details("Odd Car", specs={"bhp": "99999999999999999999 bhp"}))

    assert index.query("odd", limit=10).ids == ("odd_car",)


def test_backend_conversion_errors_are_wrapped(index: CarSearchIndex, monkeypatch: pytest.MonkeyPatch) -> None:
    index.put("car_a", _details("Car A"))

    def _overflowing_document(name: str, details: CarDetails) -> object:
        raise OverflowError("Python int too large to convert to C long")

    monkeypatch.setattr("carcatalog.search._build_document", _overflowing_document)

    with pytest.raises(SearchIndexError):
        index.put("car_b", _details("Car B"))
    assert index.query("", limit=10).ids == ("car_a",)


def test_destroy_removes_index_directory(tmp_path: Path) -> None:
    path = tmp_path / "index"
    opened, _created = CarSearchIndex.open_or_create(path)

    opened.destroy()

    assert opened.is_open is False
    assert not path.exists()
    opened.destroy()
