"""
DataModel — the normalised record sequence plus grouping indexes and domains.

Built once from the sorted records and shared read-only by every view.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

import pandas as pd

from alcohol_analytics.data.normalize import slugify
from alcohol_analytics.data.schemas import GroupMeta, NormalizedRecord, SeriesMeta

FRAME_COLUMNS = [
    "period", "date", "year", "month", "value", "units",
    "group_key", "group_label", "series_key", "series_label",
]


def records_frame(records: Sequence[NormalizedRecord]) -> pd.DataFrame:
    """Project records into a DataFrame (one row per record, same order).

    ``value`` is float64 with NaN for unreported cells; ``date`` stays an object
    column of ``datetime.date`` because clamped years fall outside Timestamp range.
    """
    if not records:
        frame = pd.DataFrame({col: pd.Series(dtype=object) for col in FRAME_COLUMNS})
        frame["year"] = frame["year"].astype("int64")
        frame["month"] = frame["month"].astype("int64")
        frame["value"] = frame["value"].astype("float64")
        return frame

    frame = pd.DataFrame(
        {
            "period": [r.period for r in records],
            "date": pd.Series([r.date for r in records], dtype=object),
            "year": [r.year for r in records],
            "month": [r.month for r in records],
            "value": pd.Series([r.value for r in records], dtype="float64"),
            "units": [r.units for r in records],
            "group_key": [r.group_key for r in records],
            "group_label": [r.group_label for r in records],
            "series_key": [r.series_key for r in records],
            "series_label": [r.series_label for r in records],
        }
    )
    return frame


@dataclass(frozen=True)
class DataModel:
    """Read-only view of the normalised dataset."""
    records: tuple[NormalizedRecord, ...] = ()
    by_group: Mapping[str, tuple[NormalizedRecord, ...]] = field(default_factory=lambda: MappingProxyType({}))
    by_series: Mapping[str, tuple[NormalizedRecord, ...]] = field(default_factory=lambda: MappingProxyType({}))
    groups: tuple[GroupMeta, ...] = ()
    series: tuple[SeriesMeta, ...] = ()
    years: tuple[int, ...] = ()
    months: tuple[int, ...] = ()

    @cached_property
    def frame(self) -> pd.DataFrame:
        return records_frame(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[NormalizedRecord]:
        return iter(self.records)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def group_labels(self) -> list[str]:
        return [g.label for g in self.groups]

    def series_options(self, group_label: str) -> list[dict]:
        """Distinct series within a group, sorted by label."""
        labels = {r.series_label for r in self.records if r.group_label == group_label}
        return [{"key": slugify(label), "label": label} for label in sorted(labels)]

    def units_for(self, group_label: str, series_label: str) -> str:
        for rec in self.records:
            if rec.group_label == group_label and rec.series_label == series_label:
                return rec.units
        return ""


def build_model(records: Iterable[NormalizedRecord]) -> DataModel:
    """Index sorted records by group and series and collect domains."""
    records = tuple(records)

    by_group: dict[str, list[NormalizedRecord]] = {}
    by_series: dict[str, list[NormalizedRecord]] = {}
    group_labels: dict[str, str] = {}
    group_units: dict[str, set[str]] = {}
    series_meta: dict[str, SeriesMeta] = {}
    years: set[int] = set()
    months: set[int] = set()

    for rec in records:
        by_group.setdefault(rec.group_key, []).append(rec)
        by_series.setdefault(rec.series_key, []).append(rec)

        group_labels.setdefault(rec.group_key, rec.group_label)
        group_units.setdefault(rec.group_key, set()).add(rec.units)

        if rec.series_key not in series_meta:
            series_meta[rec.series_key] = SeriesMeta(
                key=rec.series_key,
                label=rec.series_label,
                group_key=rec.group_key,
                group_label=rec.group_label,
                units=rec.units,
            )

        years.add(rec.year)
        months.add(rec.month)

    groups = sorted(
        (GroupMeta(key, group_labels[key], tuple(sorted(units))) for key, units in group_units.items()),
        key=lambda g: (g.label, g.key),
    )
    series = sorted(series_meta.values(), key=lambda s: (s.label, s.key))

    return DataModel(
        records=records,
        by_group=MappingProxyType({k: tuple(v) for k, v in by_group.items()}),
        by_series=MappingProxyType({k: tuple(v) for k, v in by_series.items()}),
        groups=tuple(groups),
        series=tuple(series),
        years=tuple(sorted(years)),
        months=tuple(sorted(months)),
    )
