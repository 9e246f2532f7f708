"""
Meta endpoints: health, groups, series, years, reload.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from alcohol_analytics.data.store import DataStore
from alcohol_analytics.api.dependencies import get_store
from alcohol_analytics.api.response_models import (
    HealthResponse, GroupsResponse, SeriesResponse, YearsResponse,
)

router = APIRouter(prefix="/api", tags=["meta"])


def _health(store: DataStore) -> HealthResponse:
    years = store.years()
    return HealthResponse(
        status="ok" if store.is_loaded else "error",
        records=store.record_count(),
        groups=len(store.groups()),
        series=len(store.series()),
        first_year=years[0] if years else None,
        last_year=years[-1] if years else None,
        error=store.load_error,
    )


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store)):
    return _health(store)


@router.get("/groups", response_model=GroupsResponse)
def list_groups(store: DataStore = Depends(get_store)):
    return GroupsResponse(groups=store.groups())


@router.get("/series", response_model=SeriesResponse)
def list_series(
    group: Optional[str] = Query(None, description="Group label or key"),
    store: DataStore = Depends(get_store),
):
    series = store.series(group)
    return SeriesResponse(series=series, count=len(series))


@router.get("/years", response_model=YearsResponse)
def list_years(store: DataStore = Depends(get_store)):
    return YearsResponse(years=store.years())


@router.post("/reload", response_model=HealthResponse)
def reload_data(store: DataStore = Depends(get_store)):
    """Re-read the source file and swap in the new model."""
    store.load()
    print(f"  Reload complete — {store.record_count():,} records")
    return _health(store)
