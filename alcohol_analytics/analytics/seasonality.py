"""
Seasonality heatmap — year × quarter grid for one series.
"""
from __future__ import annotations

from alcohol_analytics.config import MONTH_LABELS, QUARTER_MONTHS
from alcohol_analytics.analytics.common import Records, as_model, as_optional, select_frame, share_of


def series_lookup(records: Records) -> dict[str, list[dict]]:
    """Group label → sorted [{key, label}] of its series, groups sorted by label."""
    model = as_model(records)
    return {group: model.series_options(group) for group in model.group_labels()}


def seasonal_cells(
    records: Records,
    group_label: str,
    series_label: str,
    normalize: bool = False,
) -> list[dict]:
    """One cell per reported year and quarter month.

    A cell sums the reported values of that quarter (None when nothing was
    reported). With ``normalize`` each cell becomes its share of the year total.
    """
    frame = select_frame(records, group_label, [series_label])
    frame = frame[frame["value"].notna()]
    if frame.empty:
        return []

    grid = (
        frame.groupby(["year", "month"])["value"]
        .sum()
        .unstack("month")
        .reindex(columns=QUARTER_MONTHS)
        .sort_index()
    )

    cells = []
    for year, row in grid.iterrows():
        values = {m: as_optional(row[m]) for m in QUARTER_MONTHS}
        total = float(sum(v for v in values.values() if v is not None))
        for month in QUARTER_MONTHS:
            value = share_of(values[month], total) if normalize else values[month]
            cells.append({"year": int(year), "month": month, "value": value})
    return cells


def heatmap(
    records: Records,
    group_label: str,
    series_label: str,
    normalize: bool = False,
) -> dict:
    """Cells plus the axes, units and value extent a renderer needs."""
    model = as_model(records)
    cells = seasonal_cells(model, group_label, series_label, normalize)
    present = [c["value"] for c in cells if c["value"] is not None]
    if normalize:
        extent = (0.0, 1.0)
    elif present:
        lo, hi = min(present), max(present)
        extent = (lo, hi if hi != lo else lo + 1)
    else:
        extent = (0.0, 1.0)

    units = model.units_for(group_label, series_label)
    return {
        "group": group_label,
        "series": series_label,
        "normalize": normalize,
        "units": units,
        "years": sorted({c["year"] for c in cells}),
        "months": list(QUARTER_MONTHS),
        "month_labels": [MONTH_LABELS[m] for m in QUARTER_MONTHS],
        "extent": extent,
        "cells": cells,
    }
