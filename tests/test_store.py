# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the filesystem car store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from carcatalog.constants import DEFAULT_SKIN_URL
from carcatalog.details import CarDetails
from carcatalog.errors import CarNotFoundError, DetailsParseError
from carcatalog.models import cars_as_map
from carcatalog.store import CarStore


def _read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_load_car_lists_skin_directories_sorted(store: CarStore, make_car) -> None:
    car_dir = make_car("ks_audi_r8", skins=("zz_white", "aa_red"), details={"name": "Audi R8"})
    (car_dir / "skins" / "notes.txt").write_text("ignored", encoding="utf-8")

    car = store.load_car("ks_audi_r8")

    assert car.skins == ["aa_red", "zz_white"]
    assert car.details.name == "Audi R8"
    assert car.tyres == {}


def test_load_car_without_details_uses_pretty_name(store: CarStore, make_car) -> None:
    make_car("ks_ferrari_488_gt3")

    car = store.load_car("ks_ferrari_488_gt3")

    assert car.details.name == "KS Ferrari 488 GT3"
    assert car.details.tags == []


def test_load_car_attaches_tyres(store: CarStore, make_car) -> None:
    make_car("car_a")

    car = store.load_car("car_a", {"car_a": {"SM": "Semislicks"}, "car_b": {"H": "Hard"}})

    assert car.tyres == {"SM": "Semislicks"}


def test_load_car_missing_skins_raises(store: CarStore, install_path: Path) -> None:
    (install_path / "content" / "cars" / "no_skins" / "ui").mkdir(parents=True)

    with pytest.raises(CarNotFoundError) as excinfo:
        store.load_car("no_skins")

    assert excinfo.value.name == "no_skins"
    with pytest.raises(CarNotFoundError):
        store.load_car("never_existed")


@pytest.mark.parametrize("name", ["", ".", "..", "../escape", "a\\b"])
def test_car_path_rejects_non_component_names(store: CarStore, name: str) -> None:
    with pytest.raises(CarNotFoundError):
        store.car_path(name)


def test_load_car_corrupt_details_raises(store: CarStore, make_car) -> None:
    make_car("broken", raw_details=b"{{{")

    with pytest.raises(DetailsParseError):
        store.load_car("broken")


def test_list_cars_sorts_by_pretty_name_and_skips_non_cars(
    store: CarStore, make_car, install_path: Path
) -> None:
    cars_root = install_path / "content" / "cars"
    make_car("zz_last")
    make_car("aa_first")
    make_car("mm_middle")
    (cars_root / "loose_file.txt").write_text("x", encoding="utf-8")
    (cars_root / "missing_skins").mkdir()

    cars = store.list_cars()

    assert [car.name for car in cars] == ["aa_first", "mm_middle", "zz_last"]


def test_list_cars_missing_root_is_empty(tmp_path: Path) -> None:
    assert CarStore(tmp_path / "nowhere").list_cars() == []


def test_save_details_creates_ui_directory(store: CarStore, make_car) -> None:
    car_dir = make_car("car_a")

    store.save_details("car_a", CarDetails(name="Car A", year=1999))

    payload = _read_json(car_dir / "ui" / "ui_car.json")
    assert payload["name"] == "Car A"
    assert payload["year"] == 1999


def test_delete_car_removes_tree(store: CarStore, make_car) -> None:
    car_dir = make_car("car_a", details={"name": "Car A"})

    assert store.delete_car("car_a") is True
    assert not car_dir.exists()
    assert store.delete_car("car_a") is False


def test_delete_car_ignores_unlisted_directories(store: CarStore, install_path: Path) -> None:
    unlisted = install_path / "content" / "cars" / "no_skins"
    unlisted.mkdir()

    assert store.delete_car("no_skins") is False
    assert unlisted.exists()


def test_tags_are_persisted_without_duplicates(store: CarStore, make_car) -> None:
    car_dir = make_car("car_a", details={"name": "Car A", "tags": ["drift"]})

    store.add_tag("car_a", "drift")
    store.add_tag("car_a", "rwd")
    car = store.remove_tag("car_a", "absent")

    assert car.details.tags == ["drift", "rwd"]
    assert _read_json(car_dir / "ui" / "ui_car.json")["tags"] == ["drift", "rwd"]

    store.remove_tag("car_a", "drift")
    assert store.load_car("car_a").details.tags == ["rwd"]


def test_add_tag_unknown_car_raises(store: CarStore) -> None:
    with pytest.raises(CarNotFoundError):
        store.add_tag("ghost", "tag")


def test_update_metadata_keeps_other_fields(store: CarStore, make_car) -> None:
    make_car("car_a", details={"name": "Car A", "brand": "Brand"})

    store.update_metadata("car_a", notes="pit notes", download_url="https://example.invalid/a.zip")

    details = store.load_car("car_a").details
    assert details.brand == "Brand"
    assert details.notes == "pit notes"
    assert details.download_url == "https://example.invalid/a.zip"


def test_skin_url_prefers_preview_image(store: CarStore, make_car) -> None:
    car_dir = make_car("car_a", skins=("red", "blue"))
    (car_dir / "skins" / "red" / "preview.jpg").write_bytes(b"\xff\xd8")

    assert store.skin_url("car_a", "red") == "/content/cars/car_a/skins/red/preview.jpg"
    assert store.skin_url("car_a", "blue") == DEFAULT_SKIN_URL


def test_skin_url_uses_configured_default(install_path: Path, make_car) -> None:
    make_car("car_a")
    store = CarStore(install_path, default_skin_url="/img/none.png")

    assert store.skin_url("car_a", "default") == "/img/none.png"


def test_cars_as_map_lists_skins(store: CarStore, make_car) -> None:
    make_car("car_a", skins=("red",))
    make_car("car_b", skins=("blue", "green"))

    assert cars_as_map(store.list_cars()) == {"car_a": ["red"], "car_b": ["blue", "green"]}
