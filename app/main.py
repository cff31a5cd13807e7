from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import mock_router, router
from app.web import router as web_router
from logging_config import configure_logging
from services.dashboard import build_default_dashboard
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    dashboard = build_default_dashboard()
    if settings.auto_refresh:
        dashboard.start_auto_refresh(settings.refresh_interval_seconds)
    try:
        yield
    finally:
        dashboard.shutdown()
        build_default_dashboard.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Streetlight Monitor",
        description="Telemetry dashboard for a fleet of streetlights with primary and backup bulbs.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(mock_router)
    app.include_router(web_router)
    return app

app = create_app()
