"""
Category composition — strength-band volumes summed into year or decade buckets.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from alcohol_analytics.config import BEER_STRENGTH_GROUP, BEER_STRENGTH_LABELS
from alcohol_analytics.analytics.common import (
    Records, bucket_for, keys_for, resolve_active, select_frame, share_of,
)


def composition(
    records: Records,
    by_decade: bool = False,
    active_keys: Iterable[str] | None = None,
    group_label: str = BEER_STRENGTH_GROUP,
    category_labels: Sequence[str] = BEER_STRENGTH_LABELS,
) -> list[dict]:
    """Sum reported values per bucket and active category.

    Unreported values are skipped, so an active category with nothing reported
    in a bucket contributes 0.0 to it. Buckets are ordered by start year.
    """
    all_keys = keys_for(category_labels)
    labels = dict(zip(all_keys, category_labels))
    keys = resolve_active(all_keys, active_keys)

    frame = select_frame(records, group_label, [labels[k] for k in keys])
    frame = frame[frame["value"].notna()]
    if frame.empty or not keys:
        return []

    frame = frame.assign(bucket=[bucket_for(int(y), by_decade)[0] for y in frame["year"]])
    sums = (
        frame.groupby(["bucket", "series_key"])["value"]
        .sum()
        .unstack("series_key", fill_value=0.0)
        .reindex(columns=keys, fill_value=0.0)
        .sort_index()
    )

    buckets = []
    for start, row in sums.iterrows():
        _, key, label = bucket_for(int(start), by_decade)
        values = {k: float(row[k]) for k in keys}
        total = float(sum(values.values()))
        buckets.append({
            "key": key,
            "start": int(start),
            "label": label,
            "total": total,
            "values": values,
            "shares": {k: share_of(v, total) for k, v in values.items()},
        })
    return buckets
