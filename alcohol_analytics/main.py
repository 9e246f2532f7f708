"""
Alcohol Analytics — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alcohol_analytics.data.store import DataStore
from alcohol_analytics.api.router_meta import router as meta_router
from alcohol_analytics.api.router_views import router as views_router


def create_app(source: Path | None = None) -> FastAPI:
    """Build the API. Each app owns its own DataStore on ``app.state.store``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the dataset at startup."""
        store = DataStore(source)
        store.load()
        app.state.store = store

        if store.is_loaded:
            print(f"\nAlcohol Analytics ready — {store.record_count():,} records, "
                  f"{len(store.groups())} groups, {store.date_range()}\n")
        else:
            print(f"\nAlcohol Analytics started without data — {store.load_error}\n")
        yield

    app = FastAPI(
        title="Alcohol Analytics API",
        description="Quarterly alcohol availability — long-run volumes, per-capita trends, "
                    "beer strength mix, seasonality, spirits unit check",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(views_router)
    return app


app = create_app()
