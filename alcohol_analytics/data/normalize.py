"""
Row normalisation: numeric coercion, calendar fields, slugs, exclusion.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Iterable, Optional, Sequence

import pandas as pd

from alcohol_analytics.config import (
    PERIOD_COLUMN, GROUP_COLUMN, SERIES_COLUMN, VALUE_COLUMN, UNITS_COLUMN,
    MONTH_COLUMN_ALIASES, MISSING_TOKENS, MONTH_MAP, DEFAULT_MONTH,
    DEFAULT_GROUP_LABEL, DEFAULT_SERIES_LABEL,
)
from alcohol_analytics.data.schemas import NormalizedRecord, RawRow


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(label: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to "-", trim hyphens."""
    return _NON_ALNUM_RE.sub("-", label.lower()).strip("-")


# ---------------------------------------------------------------------------
# Cell coercion
# ---------------------------------------------------------------------------

def _is_missing(value) -> bool:
    return value is None or (not isinstance(value, str) and pd.isna(value))


def coerce_number(value) -> Optional[float]:
    """Parse a numeric cell. Returns None for "", "..", junk and non-finite."""
    if _is_missing(value):
        return None
    trimmed = str(value).strip()
    if trimmed in MISSING_TOKENS:
        return None
    try:
        numeric = float(trimmed)
    except ValueError:
        return None
    return numeric if math.isfinite(numeric) else None


def derive_year(period) -> int:
    """Whole-number parse of the period token, then its integer prefix, else 0."""
    token = "" if _is_missing(period) else str(period).strip()
    try:
        numeric = float(token) if token else 0.0
    except ValueError:
        numeric = math.nan
    if math.isfinite(numeric):
        return math.floor(numeric)

    head = token.split(".")[0]
    try:
        return int(head)
    except ValueError:
        return 0


def first_present(row: RawRow, keys: Sequence[str]) -> Optional[str]:
    """Return the value of the first key that is present and not null."""
    for key in keys:
        value = row.get(key)
        if not _is_missing(value):
            return str(value)
    return None


def derive_month(row: RawRow) -> int:
    """Quarter-end month from the month column, 12 when it can't be read."""
    token = first_present(row, MONTH_COLUMN_ALIASES) or ""
    return MONTH_MAP.get(token.strip()[:3].title(), DEFAULT_MONTH)


def period_date(year: int, month: int) -> dt.date:
    """Day 1 of the period. Years outside Python's date range are clamped."""
    clamped = min(max(year, dt.MINYEAR), dt.MAXYEAR)
    return dt.date(clamped, month, 1)


def _text(row: RawRow, key: str, default: str) -> str:
    value = row.get(key)
    return default if _is_missing(value) else str(value)


# ---------------------------------------------------------------------------
# Rows → records
# ---------------------------------------------------------------------------

def normalize_row(row: RawRow) -> NormalizedRecord | None:
    """Convert one raw row, or return None for header/footer artefacts."""
    series_label = _text(row, SERIES_COLUMN, DEFAULT_SERIES_LABEL)
    if not series_label.strip():
        return None

    period = _text(row, PERIOD_COLUMN, "")
    group_label = _text(row, GROUP_COLUMN, DEFAULT_GROUP_LABEL)
    year = derive_year(period)
    month = derive_month(row)

    return NormalizedRecord(
        period=period,
        date=period_date(year, month),
        year=year,
        month=month,
        value=coerce_number(row.get(VALUE_COLUMN)),
        units=_text(row, UNITS_COLUMN, ""),
        group_key=slugify(group_label),
        group_label=group_label,
        series_key=slugify(series_label),
        series_label=series_label,
    )


def normalize_rows(rows: Iterable[RawRow]) -> list[NormalizedRecord]:
    """Normalise every row, drop exclusions, stable-sort by date."""
    records = [rec for rec in (normalize_row(r) for r in rows) if rec is not None]
    records.sort(key=lambda rec: rec.date)
    return records
