"""
Record schemas for the normalised alcohol availability data.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Mapping, Optional

# One source line: column name → cell text (None when the column is missing)
RawRow = Mapping[str, Optional[str]]


@dataclass(frozen=True)
class NormalizedRecord:
    """One typed observation of one series at one quarter."""
    period: str                  # verbatim source token, e.g. "1986.03"
    date: dt.date                # day 1 of month in year
    year: int
    month: int                   # 3, 6, 9 or 12
    value: Optional[float]       # None = not reported (not zero)
    units: str
    group_key: str
    group_label: str
    series_key: str
    series_label: str

    @property
    def is_reported(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class GroupMeta:
    key: str
    label: str
    units: tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "units": list(self.units)}


@dataclass(frozen=True)
class SeriesMeta:
    key: str
    label: str
    group_key: str
    group_label: str
    units: str

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "group_key": self.group_key,
            "group_label": self.group_label,
            "units": self.units,
        }
