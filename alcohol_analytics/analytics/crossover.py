"""
Crossover detection — where two aligned series swap relative order.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True)
class Crossover:
    series_a: str
    series_b: str
    time: Any           # same type as the input time axis
    value: float
    exact: bool         # True when the series coincided at a sample

    def as_dict(self) -> dict:
        return {
            "series_a": self.series_a,
            "series_b": self.series_b,
            "time": self.time,
            "value": self.value,
            "exact": self.exact,
        }


def _crossing(
    t0, t1,
    a0: float, a1: float,
    b0: float, b1: float,
) -> tuple[Any, float, bool] | None:
    prev_diff = a0 - b0
    curr_diff = a1 - b1
    if prev_diff == 0:
        return t0, a0, True
    if prev_diff * curr_diff < 0:
        ratio = abs(prev_diff) / (abs(prev_diff) + abs(curr_diff))
        return t0 + (t1 - t0) * ratio, a0 + (a1 - a0) * ratio, False
    return None


def find_crossovers(
    times: Sequence[Any],
    series: Mapping[str, Sequence[Optional[float]]],
) -> list[Crossover]:
    """Every crossing between every pair of series.

    ``times`` and each series must have the same length. Time points need only
    support ``t1 - t0`` and ``t0 + delta * float`` (numbers, datetimes).
    Sample pairs with a missing value on either series are skipped.

    An exact meeting is reported at the earlier sample of a pair, so series
    that first coincide at the final sample are not reported: there is no
    following sample to pair it with.
    """
    n = len(times)
    for name, values in series.items():
        if len(values) != n:
            raise ValueError(f"Series {name!r} has {len(values)} values, expected {n}")

    found: list[Crossover] = []
    for (name_a, values_a), (name_b, values_b) in combinations(series.items(), 2):
        for i in range(1, n):
            a0, a1 = values_a[i - 1], values_a[i]
            b0, b1 = values_b[i - 1], values_b[i]
            if a0 is None or a1 is None or b0 is None or b1 is None:
                continue
            hit = _crossing(times[i - 1], times[i], a0, a1, b0, b1)
            if hit is not None:
                time, value, exact = hit
                found.append(Crossover(name_a, name_b, time, value, exact))
    return found
