"""
Spirits unit check — litres vs proof litres per period, and their ratio.
"""
from __future__ import annotations

from alcohol_analytics.config import (
    SPIRITS_GROUP, SPIRITS_SERIES, LITRES_UNITS, PROOF_UNITS, SMOOTH_WINDOW,
)
from alcohol_analytics.analytics.common import Records, safe_ratio, smooth


def unit_check(
    records: Records,
    smoothed: bool = False,
    window: int = SMOOTH_WINDOW,
) -> list[dict]:
    """One point per period token with both unit bases side by side.

    ``ratio`` is litres / proof litres (None if either is missing or proof is 0).
    ``ratio_smoothed`` is the trailing average of the ratios when ``smoothed``.
    """
    by_period: dict[str, dict] = {}
    for rec in records:
        if rec.group_label != SPIRITS_GROUP or rec.series_label != SPIRITS_SERIES:
            continue
        point = by_period.setdefault(rec.period, {
            "date": rec.date,
            "period": rec.period,
            "litres": None,
            "proof": None,
        })
        if rec.units == LITRES_UNITS:
            point["litres"] = rec.value
        elif rec.units == PROOF_UNITS:
            point["proof"] = rec.value

    points = sorted(by_period.values(), key=lambda p: p["date"])
    ratios = [safe_ratio(p["litres"], p["proof"]) for p in points]
    shown = smooth(ratios, window) if smoothed else ratios
    for point, ratio, ratio_shown in zip(points, ratios, shown):
        point["ratio"] = ratio
        point["ratio_smoothed"] = ratio_shown
    return points
