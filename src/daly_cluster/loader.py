"""Load country records from the life expectancy CSV.

Columns are read by position (see config.py), not by header name:

  0   country name
  8   communicable disease burden
  9   non-communicable disease burden
  12  CO2 emissions

Feature text that is missing or is not a plain decimal number counts as 0.0.
Surrounding whitespace and digit-group underscores make a value invalid.
A row whose three features are all exactly 0.0 is treated as "no data" and
dropped. Only the first row for each country name is kept.
"""

from __future__ import annotations

import re
from pathlib import Path

import polars as pl

from daly_cluster.config import (
    CO2_COLUMN,
    COMMUNICABLE_COLUMN,
    NAME_COLUMN,
    NON_COMMUNICABLE_COLUMN,
)
from daly_cluster.models import Country


class DataLoadError(Exception):
    """Raised when the source CSV cannot be read or parsed."""


_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def _parse_feature(raw: str | None) -> float:
    if raw is None or not _NUMBER.fullmatch(raw):
        return 0.0
    return float(raw)


def _column(frame: pl.DataFrame, position: int) -> list[str | None]:
    """Return a column by position, or all-missing if the frame is too narrow."""
    if position < frame.width:
        return frame.to_series(position).to_list()
    return [None] * frame.height


def read_source(path: Path) -> pl.DataFrame:
    """Read the CSV with every column as a string.

    Rows shorter than the header are padded with nulls. A row with more
    fields than the header is malformed.

    Raises DataLoadError if the file is missing, unreadable, or malformed.
    """
    try:
        return pl.read_csv(
            path,
            has_header=True,
            infer_schema_length=0,
            raise_if_empty=False,
        )
    except (OSError, pl.exceptions.PolarsError) as exc:
        raise DataLoadError(f"Could not read {path}: {exc}") from exc


def countries_from_frame(frame: pl.DataFrame) -> list[Country]:
    """Convert a string-typed frame into deduplicated Country records."""
    names = _column(frame, NAME_COLUMN)
    communicable = _column(frame, COMMUNICABLE_COLUMN)
    non_communicable = _column(frame, NON_COMMUNICABLE_COLUMN)
    co2 = _column(frame, CO2_COLUMN)

    seen: set[str] = set()
    countries: list[Country] = []
    for raw_name, raw_comm, raw_non_comm, raw_co2 in zip(
        names, communicable, non_communicable, co2
    ):
        name = raw_name or ""
        values = (
            _parse_feature(raw_comm),
            _parse_feature(raw_non_comm),
            _parse_feature(raw_co2),
        )
        if values == (0.0, 0.0, 0.0) or name in seen:
            continue
        seen.add(name)
        countries.append(Country(name, *values))
    return countries


def load_countries(path: Path) -> list[Country]:
    """Load and clean country records from a CSV file.

    Returns a possibly-empty list in file order.
    """
    frame = read_source(Path(path))
    countries = countries_from_frame(frame)
    print(f"Loaded and cleaned {len(countries)} unique countries.")
    return countries


def normalize_features(countries: list[Country]) -> list[Country]:
    """Min-max scale each feature to [0, 1] across the given countries.

    Returns new Country objects; the inputs are not modified. A feature with
    zero range maps to 0.0 for every country.
    """
    if not countries:
        return []

    columns = list(zip(*(c.features for c in countries)))
    mins = [min(col) for col in columns]
    maxs = [max(col) for col in columns]

    normalized = []
    for country in countries:
        scaled = []
        for value, lo, hi in zip(country.features, mins, maxs):
            span = hi - lo
            scaled.append(0.0 if span == 0.0 else (value - lo) / span)
        normalized.append(Country(country.name, *scaled, cluster=country.cluster))
    return normalized
