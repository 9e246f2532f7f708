"""
Share / ratio policy, smoothing, bucketing and pivot helpers used across views.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from alcohol_analytics.config import SMOOTH_WINDOW
from alcohol_analytics.data.model import DataModel, build_model
from alcohol_analytics.data.normalize import period_date, slugify
from alcohol_analytics.data.schemas import NormalizedRecord


def as_optional(value) -> Optional[float]:
    """NaN/None → None, anything else → float."""
    if value is None or pd.isna(value):
        return None
    return float(value)


# ---------------------------------------------------------------------------
# Share vs ratio (the two policies differ on purpose)
# ---------------------------------------------------------------------------

def share_of(value: Optional[float], total: float) -> Optional[float]:
    """Member share of a bucket total.

    A zero total gives 0.0 for every member, reported or not. Otherwise an
    unreported member stays None.
    """
    if total == 0:
        return 0.0
    if value is None:
        return None
    return value / total


def safe_ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Ratio that is None when either side is missing or the denominator is 0."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------

def smooth(values: Sequence[Optional[float]], window: int = SMOOTH_WINDOW) -> list[Optional[float]]:
    """Trailing moving average over the reported values in each window.

    Where a window holds no reported values the original (None) is kept.
    """
    values = list(values)
    if window <= 1 or not values:
        return values
    series = pd.Series([np.nan if v is None else v for v in values], dtype="float64")
    means = series.rolling(window, min_periods=1).mean()
    return [orig if pd.isna(mean) else float(mean) for orig, mean in zip(values, means)]


# ---------------------------------------------------------------------------
# Bucketing
# ---------------------------------------------------------------------------

def decade_start(year: int) -> int:
    return (year // 10) * 10


def bucket_for(year: int, by_decade: bool) -> tuple[int, str, str]:
    """Return (start, key, label) of the year or decade bucket."""
    if by_decade:
        start = decade_start(year)
        return start, f"{start}s", f"{start}-{start + 9}"
    return year, str(year), str(year)


# ---------------------------------------------------------------------------
# Selection + pivot
# ---------------------------------------------------------------------------

Records = Union[DataModel, Sequence[NormalizedRecord]]


def as_model(records: Records) -> DataModel:
    """The shared model as-is, or a model built over a bare record sequence."""
    if isinstance(records, DataModel):
        return records
    return build_model(records)


def select_frame(
    records: Records,
    group_label: str,
    series_labels: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Rows of one group (optionally restricted to some series) from the model's frame."""
    frame = as_model(records).frame
    mask = frame["group_label"] == group_label
    if series_labels is not None:
        mask &= frame["series_label"].isin(list(series_labels))
    return frame[mask]


def pivot_by_period(frame: pd.DataFrame, keys: Sequence[str]) -> pd.DataFrame:
    """One row per (year, month), one column per series key.

    Cells sum the reported values; a cell with nothing reported is NaN.
    Rows are ordered by (year, month), i.e. by date.
    """
    keys = list(keys)
    if frame.empty:
        index = pd.MultiIndex.from_tuples([], names=["year", "month"])
        return pd.DataFrame(index=index, columns=keys, dtype="float64")
    wide = (
        frame.groupby(["year", "month", "series_key"])["value"]
        .sum(min_count=1)
        .unstack("series_key")
        .reindex(columns=keys)
        .sort_index()
    )
    return wide.astype("float64")


def axis_dates(wide: pd.DataFrame) -> list:
    """Period dates for a pivot produced by pivot_by_period."""
    return [period_date(int(year), int(month)) for year, month in wide.index]


def keys_for(labels: Sequence[str]) -> list[str]:
    return [slugify(label) for label in labels]


def resolve_active(keys: Sequence[str], active_keys) -> list[str]:
    """Active subset of keys, in canonical order. None means all."""
    if active_keys is None:
        return list(keys)
    wanted = set(active_keys)
    return [k for k in keys if k in wanted]


def max_present(values) -> float:
    """Largest reported value, 0.0 when nothing is reported."""
    present = [v for v in values if v is not None and not math.isnan(v)]
    return max(present) if present else 0.0


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas scalars to native Python for JSON.

    NaN becomes None so that "not reported" survives serialisation.
    """
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    return obj
