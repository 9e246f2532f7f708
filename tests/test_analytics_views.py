"""Tests for the per-view aggregation functions over the sample dataset."""

from __future__ import annotations

import datetime as dt

import pytest

from alcohol_analytics.analytics.composition import composition
from alcohol_analytics.analytics.longrun import long_run
from alcohol_analytics.analytics.percapita import per_capita
from alcohol_analytics.analytics.seasonality import heatmap, seasonal_cells, series_lookup
from alcohol_analytics.analytics.spirits import unit_check
from alcohol_analytics.data.normalize import normalize_rows
from tests.factories import BEVERAGE, MILD, STRONG, quarter


# ---------------------------------------------------------------------------
# Long-run
# ---------------------------------------------------------------------------

def test_long_run_totals_and_shares(records) -> None:
    """Shares are of the point total; an unreported series keeps a None share."""
    result = long_run(records)
    assert result["keys"] == ["total-beer", "total-wine", "total-spirits"]
    first, second = result["points"]

    assert first["date"] == dt.date(2020, 3, 1)
    assert first["total"] == 100.0
    assert first["shares"] == {"total-beer": 0.6, "total-wine": 0.3, "total-spirits": 0.1}
    assert sum(first["shares"].values()) == pytest.approx(1.0)

    assert second["total"] == 90.0
    assert second["values"]["total-spirits"] is None
    assert second["shares"]["total-spirits"] is None
    assert second["shares"]["total-beer"] == pytest.approx(70 / 90)
    assert result["max_value"] == 70.0


def test_long_run_active_subset(records) -> None:
    """Totals and maxima are scoped to the active series."""
    result = long_run(records, active_keys=["total-wine", "total-beer"])
    assert result["keys"] == ["total-beer", "total-wine"]
    assert result["points"][0]["total"] == 90.0
    assert result["points"][0]["shares"]["total-beer"] == pytest.approx(60 / 90)


def test_long_run_switches_measurement_group(records) -> None:
    result = long_run(records, "Litres of Alcohol")
    (point,) = result["points"]
    assert point["total"] == 7.0
    assert point["values"]["total-spirits"] is None


def test_long_run_rejects_unknown_group(records) -> None:
    with pytest.raises(ValueError):
        long_run(records, "Litres of Milk")


# ---------------------------------------------------------------------------
# Per capita
# ---------------------------------------------------------------------------

def test_per_capita_aligns_series_and_finds_crossover(records) -> None:
    """Beer and wine per head meet exactly at the June quarter."""
    result = per_capita(records)
    assert result["dates"] == [dt.date(2020, 3, 1), dt.date(2020, 6, 1), dt.date(2020, 9, 1)]
    assert [s["key"] for s in result["series"]] == ["beer-per-head", "wine-per-head", "spirits-per-head"]
    assert result["series"][0]["values"] == [1.0, 2.0, 3.0]

    (crossing,) = result["crossovers"]
    assert crossing["series_a"] == "Beer Per Head"
    assert crossing["series_b"] == "Wine Per Head"
    assert crossing["time"] == dt.datetime(2020, 6, 1)
    assert crossing["value"] == 2.0
    assert crossing["exact"] is True
    assert result["max_value"] == 3.0


def test_per_capita_smoothing(records) -> None:
    result = per_capita(records, smoothed=True)
    assert result["smoothed"] is True
    assert result["series"][0]["values"] == pytest.approx([1.0, 1.5, 2.0])


def test_per_capita_empty_input() -> None:
    result = per_capita([])
    assert result["dates"] == []
    assert result["crossovers"] == []
    assert result["max_value"] == 0.0


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def test_composition_decade_bucket_of_beer_quarters() -> None:
    """Four Beer quarters bucketed by decade: one bucket, total 100, share 1."""
    records = normalize_rows([
        quarter("2020.03", BEVERAGE, "Beer", "10"),
        quarter("2020.06", BEVERAGE, "Beer", "20"),
        quarter("2020.09", BEVERAGE, "Beer", "30"),
        quarter("2020.12", BEVERAGE, "Beer", "40"),
    ])
    (bucket,) = composition(records, by_decade=True, category_labels=["Beer"])
    assert bucket["key"] == "2020s"
    assert bucket["label"] == "2020-2029"
    assert bucket["total"] == 100.0
    assert bucket["shares"] == {"beer": 1.0}


def test_composition_fills_unreported_categories_with_zero(records) -> None:
    """Active bands with nothing reported contribute 0.0."""
    (bucket,) = composition(records)
    assert bucket["key"] == "2020"
    assert bucket["total"] == 110.0
    mild_key = "beer-containing-between-2-501-and-4-350-alc"
    assert bucket["values"][mild_key] == 90.0
    assert bucket["values"]["beer-containing-not-more-than-1-150-alcohol"] == 0.0
    assert sum(bucket["shares"].values()) == pytest.approx(1.0)


def test_composition_active_subset_and_empty(records) -> None:
    strong_key = "beer-containing-more-than-5-00-alcohol"
    (bucket,) = composition(records, active_keys=[strong_key])
    assert bucket["total"] == 20.0
    assert bucket["shares"] == {strong_key: 1.0}
    assert composition([]) == []
    assert composition(records, active_keys=[]) == []


def test_composition_orders_buckets_by_start() -> None:
    records = normalize_rows([
        quarter("2001.03", BEVERAGE, MILD, "1"),
        quarter("1999.03", BEVERAGE, STRONG, "2"),
    ])
    assert [b["key"] for b in composition(records)] == ["1999", "2001"]
    assert [b["key"] for b in composition(records, by_decade=True)] == ["1990s", "2000s"]


# ---------------------------------------------------------------------------
# Seasonality
# ---------------------------------------------------------------------------

def test_seasonal_cells_grid(records) -> None:
    """One cell per reported year and quarter month."""
    cells = seasonal_cells(records, BEVERAGE, "Beer")
    assert len(cells) == 8
    assert cells[0] == {"year": 2020, "month": 3, "value": 100.0}
    assert cells[4] == {"year": 2021, "month": 3, "value": 110.0}
    assert cells[5]["value"] is None


def test_seasonal_cells_normalised_to_year_share(records) -> None:
    cells = seasonal_cells(records, BEVERAGE, "Beer", normalize=True)
    assert [c["value"] for c in cells[:4]] == pytest.approx([0.2, 0.24, 0.26, 0.3])
    assert cells[4]["value"] == 1.0
    assert cells[5]["value"] is None


def test_heatmap_extent_and_axes(records) -> None:
    result = heatmap(records, BEVERAGE, "Beer")
    assert result["years"] == [2020, 2021]
    assert result["months"] == [3, 6, 9, 12]
    assert result["month_labels"] == ["Mar", "Jun", "Sep", "Dec"]
    assert result["extent"] == (100.0, 150.0)
    assert result["units"] == "Litres"
    assert heatmap(records, BEVERAGE, "Beer", normalize=True)["extent"] == (0.0, 1.0)


def test_heatmap_flat_extent_is_widened() -> None:
    records = normalize_rows([quarter("2020.03", BEVERAGE, "Beer", "5")])
    assert heatmap(records, BEVERAGE, "Beer")["extent"] == (5.0, 6.0)


def test_series_lookup(records) -> None:
    lookup = series_lookup(records)
    assert list(lookup) == ["(DISC) Volume & Volume Per Head", "Litres of Alcohol", "Litres of Beverage"]
    assert lookup["Litres of Alcohol"] == [
        {"key": "total-beer", "label": "Total beer"},
        {"key": "total-wine", "label": "Total wine"},
    ]


# ---------------------------------------------------------------------------
# Spirits unit check
# ---------------------------------------------------------------------------

def test_unit_check_pairs_litres_and_proof(records) -> None:
    """Ratio is litres / proof litres; a zero or missing side gives None."""
    points = unit_check(records)
    assert [p["period"] for p in points] == ["2020.03", "2020.06", "2020.09"]
    assert [p["ratio"] for p in points] == [2.5, None, None]
    assert points[1]["proof"] == 0.0
    assert points[2]["litres"] is None
    assert [p["ratio_smoothed"] for p in points] == [2.5, None, None]


def test_unit_check_smoothed_ratio(records) -> None:
    points = unit_check(records, smoothed=True)
    assert [p["ratio"] for p in points] == [2.5, None, None]
    assert [p["ratio_smoothed"] for p in points] == [2.5, 2.5, 2.5]


def test_seasonality_reads_model_lookups(model, records) -> None:
    """Given the model, lookups come from its own helpers and match a bare record list."""
    assert series_lookup(model) == series_lookup(records)
    assert series_lookup(model)["Litres of Alcohol"] == model.series_options("Litres of Alcohol")
    result = heatmap(model, BEVERAGE, "Beer")
    assert result["units"] == model.units_for(BEVERAGE, "Beer")
    assert result == heatmap(records, BEVERAGE, "Beer")
