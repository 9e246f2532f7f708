"""Tests for the FastAPI app: meta endpoints, view JSON and downloads."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from alcohol_analytics.main import create_app


@pytest.fixture
def client(csv_path):
    app = create_app(source=csv_path)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def unloaded_client(tmp_path):
    app = create_app(source=tmp_path / "missing.csv")
    with TestClient(app) as c:
        yield c


def test_health(client) -> None:
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["records"] == 31
    assert body["groups"] == 3
    assert (body["first_year"], body["last_year"]) == (2020, 2021)
    assert body["error"] is None


def test_groups_series_years(client) -> None:
    groups = client.get("/api/groups").json()["groups"]
    assert [g["label"] for g in groups][0] == "(DISC) Volume & Volume Per Head"

    series = client.get("/api/series", params={"group": "Litres of Alcohol"}).json()
    assert series["count"] == 2
    assert client.get("/api/years").json() == {"years": [2020, 2021]}


def test_views_catalogue(client) -> None:
    views = client.get("/api/views").json()["views"]
    assert [v["id"] for v in views] == ["longrun", "percapita", "beerstrength", "seasonality", "spiritscheck"]


def test_view_json(client) -> None:
    body = client.get("/api/views/longrun").json()
    assert body["filename"] == "long-run-litres-of-beverage"
    assert body["result"]["points"][0]["date"] == "2020-03-01"
    assert body["result"]["points"][1]["shares"]["total-spirits"] is None


def test_view_json_with_params(client) -> None:
    body = client.get("/api/views/beerstrength", params={"by_decade": "true", "as_share": "1"}).json()
    assert body["filename"] == "beer-strength-decade-share"
    assert body["result"][0]["key"] == "2020s"

    crossings = client.get("/api/views/percapita").json()["result"]["crossovers"]
    assert crossings[0]["time"] == "2020-06-01T00:00:00"


def test_view_errors(client) -> None:
    assert client.get("/api/views/nope").status_code == 404
    assert client.get("/api/views/longrun", params={"group": "Litres of Milk"}).status_code == 400
    assert client.get("/api/views/percapita", params={"smoothed": "maybe"}).status_code == 400
    assert client.get("/api/views/percapita/export", params={"fmt": "pdf"}).status_code == 400


def test_export_csv(client) -> None:
    resp = client.get("/api/views/percapita/export", params={"smoothed": "true"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "per-capita-smoothed.csv" in resp.headers["content-disposition"]
    assert resp.text.splitlines()[0] == "year,month,beer-per-head,wine-per-head,spirits-per-head"


def test_export_xlsx(client) -> None:
    resp = client.get("/api/views/spiritscheck/export", params={"fmt": "xlsx"})
    assert resp.status_code == 200
    assert "spirits-check-raw.xlsx" in resp.headers["content-disposition"]
    assert resp.content[:2] == b"PK"


def test_reload(client) -> None:
    body = client.post("/api/reload").json()
    assert body["status"] == "ok"
    assert body["records"] == 31


def test_unloaded_store_reports_failure(unloaded_client) -> None:
    """A failed load surfaces the message and views answer 503."""
    body = unloaded_client.get("/api/health").json()
    assert body["status"] == "error"
    assert body["error"].startswith("Failed to load data:")
    assert body["records"] == 0

    resp = unloaded_client.get("/api/views/longrun")
    assert resp.status_code == 503
    assert resp.json()["detail"].startswith("Failed to load data:")
    assert unloaded_client.get("/api/groups").json() == {"groups": []}


def test_repeated_query_keys_are_all_kept(client) -> None:
    """``?active=a&active=b`` selects both keys, same as ``?active=a,b``."""
    repeated = client.get(
        "/api/views/longrun", params=[("active", "total-beer"), ("active", "total-wine")],
    ).json()
    joined = client.get("/api/views/longrun", params={"active": "total-beer,total-wine"}).json()
    assert repeated["params"]["active"] == ["total-beer", "total-wine"]
    assert repeated["result"] == joined["result"]


def test_exports_with_different_params_stay_separate(client) -> None:
    """Each download carries its own rows, with no file shared between requests."""
    beer = client.get("/api/views/longrun/export", params={"active": "total-beer"})
    both = client.get("/api/views/longrun/export", params={"active": "total-beer,total-wine"})
    assert beer.text.splitlines()[0] == "year,month,total_litres,total-beer_share"
    assert both.text.splitlines()[0] == "year,month,total_litres,total-beer_share,total-wine_share"
    assert "long-run-litres-of-beverage.csv" in beer.headers["content-disposition"]


def test_failed_reload_keeps_serving(client, csv_path) -> None:
    """Reloading a vanished file reports the error while views keep working."""
    csv_path.unlink()
    body = client.post("/api/reload").json()
    assert body["status"] == "ok"
    assert body["records"] == 31
    assert body["error"].startswith("Failed to load data:")
    assert client.get("/api/views/longrun").status_code == 200
