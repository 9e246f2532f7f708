"""
Long-run volumes — beer / wine / spirits totals and shares on one time axis.
"""
from __future__ import annotations

from typing import Iterable

from alcohol_analytics.config import LONG_RUN_GROUPS, LONG_RUN_SERIES
from alcohol_analytics.analytics.common import (
    Records, as_optional, axis_dates, keys_for, max_present, pivot_by_period,
    resolve_active, select_frame, share_of,
)


def long_run(
    records: Records,
    group_label: str = LONG_RUN_GROUPS[0],
    active_keys: Iterable[str] | None = None,
) -> dict:
    """Pivot the active beverage totals of a measurement group by quarter.

    Totals, shares and max_value cover the active series only.
    """
    if group_label not in LONG_RUN_GROUPS:
        raise ValueError(f"Unknown measurement group: {group_label!r}. Valid: {LONG_RUN_GROUPS}")

    all_keys = keys_for(LONG_RUN_SERIES)
    labels = dict(zip(all_keys, LONG_RUN_SERIES))
    keys = resolve_active(all_keys, active_keys)

    frame = select_frame(records, group_label, [labels[k] for k in keys])
    wide = pivot_by_period(frame, keys)

    points = []
    for date, ((year, month), row) in zip(axis_dates(wide), wide.iterrows()):
        values = {k: as_optional(row[k]) for k in keys}
        total = float(sum(v for v in values.values() if v is not None))
        points.append({
            "date": date,
            "year": int(year),
            "month": int(month),
            "total": total,
            "values": values,
            "shares": {k: share_of(v, total) for k, v in values.items()},
        })

    return {
        "group": group_label,
        "keys": keys,
        "labels": {k: labels[k] for k in keys},
        "points": points,
        "max_value": max_present(v for p in points for v in p["values"].values()),
    }
