"""
FastAPI dependencies — the app-owned DataStore and query-string view params.
"""
from __future__ import annotations

from fastapi import HTTPException, Request

from alcohol_analytics.data.store import DataStore
from alcohol_analytics.data.model import DataModel


def get_store(request: Request) -> DataStore:
    """The store created by the app's lifespan hook, loaded or not."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(503, "Server not initialized yet")
    return store


def get_model(request: Request) -> DataModel:
    """The loaded model. A failed or pending load is a 503 carrying the reason."""
    store = get_store(request)
    if not store.is_loaded:
        raise HTTPException(503, store.load_error or "Data not loaded yet")
    return store.model


def view_params(request: Request) -> dict[str, str]:
    """Raw view parameters: every query param the route itself doesn't consume.

    Repeated keys (``?active=a&active=b``) are joined with commas.
    """
    query = request.query_params
    return {k: ",".join(query.getlist(k)) for k in dict.fromkeys(query.keys()) if k != "fmt"}
