# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Codec for ``ui_car.json`` documents and the models they decode into."""

from __future__ import annotations

import codecs
import json
import math
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import DetailsParseError

CurvePoint: TypeAlias = list[int | float]

_LEADING_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"[0-9]+")
_CONTROL_BYTES_RE: Final[re.Pattern[bytes]] = re.compile(rb"[\t\r\n]")
JSON_INDENT: Final[int] = 3
INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1
_INT64_MAX_DIGITS: Final[int] = len(str(INT64_MAX))


def extract_leading_integer(text: str) -> int:
    """Return the first run of digits found in ``text`` as an integer.

    Args:
        text: Human-readable spec value such as ``"450 bhp"``.

    Returns:
        int: Parsed digit run, or ``0`` when ``text`` holds no digits or
        when the run does not fit a signed 64-bit integer.
    """

    match = _LEADING_INTEGER_RE.search(text)
    if match is None:
        return 0
    digits = match.group().lstrip("0")
    if len(digits) > _INT64_MAX_DIGITS:
        return 0
    return fit_int64(int(digits or "0"))


def fit_int64(value: int) -> int:
    """Return ``value`` when it fits a signed 64-bit integer, otherwise ``0``."""

    return value if INT64_MIN <= value <= INT64_MAX else 0


def _coerce_text(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _coerce_number(value: object) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


class CarSpecsNumeric(BaseModel):
    """Integer view of :class:`CarSpecs`, always derived from the string form."""

    model_config = ConfigDict(extra="ignore")

    acceleration: int = 0
    bhp: int = 0
    pwratio: int = 0
    topspeed: int = 0
    torque: int = 0
    weight: int = 0

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_integer(cls, value: object) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return fit_int64(value)
        return extract_leading_integer(_coerce_text(value))


class CarSpecs(BaseModel):
    """Performance figures as authored, e.g. ``"450 bhp"`` or ``"3.2s"``."""

    model_config = ConfigDict(extra="ignore")

    acceleration: str = ""
    bhp: str = ""
    pwratio: str = ""
    topspeed: str = ""
    torque: str = ""
    weight: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_spec_text(cls, value: object) -> str:
        return _coerce_text(value)

    def numeric(self) -> CarSpecsNumeric:
        """Return the integer form of every spec field.

        Returns:
            CarSpecsNumeric: Specs with each value reduced to its leading digit run.
        """

        return CarSpecsNumeric(
            acceleration=extract_leading_integer(self.acceleration),
            bhp=extract_leading_integer(self.bhp),
            pwratio=extract_leading_integer(self.pwratio),
            topspeed=extract_leading_integer(self.topspeed),
            torque=extract_leading_integer(self.torque),
            weight=extract_leading_integer(self.weight),
        )

    def text(self) -> str:
        """Return the non-empty spec strings joined for full-text indexing."""

        values = (self.acceleration, self.bhp, self.pwratio, self.topspeed, self.torque, self.weight)
        return " ".join(value for value in values if value)


class CarDetails(BaseModel):
    """Metadata document persisted at ``content/cars/<name>/ui/ui_car.json``.

    ``specs`` is a cache of ``specs_full`` and is recomputed whenever a
    document is validated or serialized. ``download_url`` and ``notes`` are
    server-local fields added by catalog operators.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    author: str = ""
    brand: str = ""
    car_class: str = Field(default="", alias="class")
    country: str = ""
    description: str = ""
    name: str = ""
    power_curve: list[CurvePoint] = Field(default_factory=list, alias="powerCurve")
    specs_full: CarSpecs = Field(default_factory=CarSpecs, alias="specs")
    specs: CarSpecsNumeric = Field(default_factory=CarSpecsNumeric, alias="spec")
    tags: list[str] = Field(default_factory=list)
    torque_curve: list[CurvePoint] = Field(default_factory=list, alias="torqueCurve")
    url: str = ""
    version: str = ""
    year: int = 0

    download_url: str = Field(default="", alias="downloadURL")
    notes: str = ""

    @field_validator(
        "author",
        "brand",
        "car_class",
        "country",
        "description",
        "name",
        "url",
        "version",
        "download_url",
        "notes",
        mode="before",
    )
    @classmethod
    def _coerce_field_text(cls, value: object) -> str:
        return _coerce_text(value)

    @field_validator("specs_full", "specs", mode="before")
    @classmethod
    def _coerce_specs_block(cls, value: object) -> object:
        return value if isinstance(value, Mapping) else {}

    @field_validator("power_curve", "torque_curve", mode="before")
    @classmethod
    def _coerce_curve(cls, value: object) -> list[CurvePoint]:
        if not isinstance(value, list):
            return []
        points: list[CurvePoint] = []
        for raw_point in value:
            if not isinstance(raw_point, list) or len(raw_point) != 2:
                continue
            x_value, y_value = (_coerce_number(item) for item in raw_point)
            if x_value is None or y_value is None:
                continue
            points.append([x_value, y_value])
        return points

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        texts = (_coerce_text(item) for item in value)
        return list(dict.fromkeys(tag for tag in texts if tag))

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value: object) -> int:
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return fit_int64(value)
        if isinstance(value, float):
            return fit_int64(int(value)) if math.isfinite(value) else 0
        return extract_leading_integer(_coerce_text(value))

    @model_validator(mode="after")
    def _derive_numeric_specs(self) -> CarDetails:
        self.specs = self.specs_full.numeric()
        return self

    def refresh_numeric_specs(self) -> None:
        """Recompute ``specs`` from the human-readable ``specs_full`` block."""

        self.specs = self.specs_full.numeric()

    def add_tag(self, tag: str) -> bool:
        """Add ``tag`` unless it is already present.

        Returns:
            bool: ``True`` when the tag was added.
        """

        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove ``tag`` when present; a missing tag is left alone.

        Returns:
            bool: ``True`` when at least one occurrence was removed.
        """

        remaining = [existing for existing in self.tags if existing != tag]
        if len(remaining) == len(self.tags):
            return False
        self.tags = remaining
        return True


def clean_details_bytes(raw: bytes) -> bytes:
    """Strip tab, carriage-return and newline bytes plus a leading UTF-8 BOM.

    Args:
        raw: Bytes read from a possibly hand-edited ``ui_car.json``.

    Returns:
        bytes: Payload suitable for strict JSON decoding.
    """

    cleaned = _CONTROL_BYTES_RE.sub(b"", raw)
    if cleaned.startswith(codecs.BOM_UTF8):
        cleaned = cleaned[len(codecs.BOM_UTF8) :]
    return cleaned


def parse_details(raw: bytes, *, source: str | Path | None = None) -> CarDetails:
    """Decode a ``ui_car.json`` payload into :class:`CarDetails`.

    Individual malformed fields fall back to their defaults; only payloads
    that are not a JSON object at all are rejected.

    Args:
        raw: Raw document bytes.
        source: Optional path or label used in error messages.

    Returns:
        CarDetails: Decoded details with numeric specs recomputed.

    Raises:
        DetailsParseError: If the payload is not valid JSON or not an object.
    """

    context = str(source) if source is not None else "<car details>"
    text = clean_details_bytes(raw).decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise DetailsParseError(f"{context}: failed to parse car details JSON") from exc
    if not isinstance(payload, Mapping):
        raise DetailsParseError(f"{context}: expected a JSON object")
    try:
        return CarDetails.model_validate(payload)
    except ValidationError as exc:  # pragma: no cover - field validators coerce every field
        raise DetailsParseError(f"{context}: invalid car details") from exc


def serialize_details(details: CarDetails) -> bytes:
    """Encode ``details`` as indented JSON using the on-disk key names.

    Args:
        details: Details to encode; numeric specs are refreshed first.

    Returns:
        bytes: UTF-8 encoded JSON terminated by a newline.
    """

    details.refresh_numeric_specs()
    payload = details.model_dump(mode="json", by_alias=True)
    return (json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False) + "\n").encode("utf-8")


def read_details(path: Path) -> CarDetails:
    """Load and decode the details document stored at ``path``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        DetailsParseError: If the document is structurally corrupt.
    """

    return parse_details(path.read_bytes(), source=path)


def write_details(path: Path, details: CarDetails) -> None:
    """Write ``details`` to ``path``, creating parent directories."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(serialize_details(details))


__all__ = [
    "CarDetails",
    "CarSpecs",
    "CarSpecsNumeric",
    "CurvePoint",
    "clean_details_bytes",
    "extract_leading_integer",
    "fit_int64",
    "parse_details",
    "read_details",
    "serialize_details",
    "write_details",
]
