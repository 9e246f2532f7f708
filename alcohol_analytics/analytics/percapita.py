"""
Per-capita trends — per-head series, optional smoothing, and crossovers.
"""
from __future__ import annotations

import datetime as dt

from alcohol_analytics.config import PER_HEAD_GROUP, PER_CAPITA_SERIES, SMOOTH_WINDOW
from alcohol_analytics.analytics.common import (
    Records, as_optional, axis_dates, keys_for, max_present, pivot_by_period,
    select_frame, smooth,
)
from alcohol_analytics.analytics.crossover import find_crossovers


def per_capita(
    records: Records,
    smoothed: bool = False,
    window: int = SMOOTH_WINDOW,
) -> dict:
    """Beer / wine / spirits per head aligned on a shared quarter axis."""
    keys = keys_for(PER_CAPITA_SERIES)
    labels = dict(zip(keys, PER_CAPITA_SERIES))

    frame = select_frame(records, PER_HEAD_GROUP, PER_CAPITA_SERIES)
    wide = pivot_by_period(frame, keys)
    dates = axis_dates(wide)

    values = {k: [as_optional(v) for v in wide[k]] for k in keys}
    if smoothed:
        values = {k: smooth(v, window) for k, v in values.items()}

    # Interpolated crossings need sub-day precision
    times = [dt.datetime(d.year, d.month, d.day) for d in dates]
    crossings = find_crossovers(times, {labels[k]: values[k] for k in keys})

    return {
        "dates": dates,
        "smoothed": smoothed,
        "series": [{"key": k, "label": labels[k], "values": values[k]} for k in keys],
        "crossovers": [c.as_dict() for c in crossings],
        "max_value": max_present(v for k in keys for v in values[k]),
    }
