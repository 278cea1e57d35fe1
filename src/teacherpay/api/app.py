"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from teacherpay.api.routes import health, paysheets
from teacherpay.core.config import AppSettings
from teacherpay.core.logging import setup_logging
from teacherpay.importer.main import PaysheetImporter
from teacherpay.orchestration.storage_router import StorageRouter
from teacherpay.persistence import create_stores


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down application resources."""
    settings: AppSettings = getattr(app.state, "settings", None) or AppSettings()
    setup_logging(settings.log_level)

    router = getattr(app.state, "router", None)
    if router is None:
        router = StorageRouter(*create_stores(settings))

    app.state.settings = settings
    app.state.router = router
    app.state.importer = PaysheetImporter(router, settings)
    yield

    for store in (router.primary, router.secondary):
        close = getattr(store, "close", None)
        if close is not None:
            await close()


def create_app(settings: AppSettings | None = None, router: StorageRouter | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``settings`` and ``router`` override what the lifespan would build.
    """
    app = FastAPI(
        title="TeacherPay Paysheet Import Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.router = router
    app.include_router(health.router)
    app.include_router(paysheets.router, tags=["paysheets"])
    return app
