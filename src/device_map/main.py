"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request

import structlog
import uvicorn

from device_map import __version__
from device_map.api.deps import close_db_manager, get_db_manager, get_settings
from device_map.api.routers import devices
from device_map.config import Settings
from device_map.store import DeviceStore

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: create the schema and dispose the engine."""
    settings: Settings = app.state.settings
    db = get_db_manager(settings)
    await DeviceStore(db).initialize()

    logger.info("device_map_starting", host=settings.host, port=settings.port)
    yield
    await close_db_manager()
    logger.info("device_map_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Device Map API",
        description="Device registry with coordinates and signal quality",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    # CORS headers go on every response, pre-flight included
    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = settings.cors_allow_origin
        response.headers["Access-Control-Allow-Headers"] = settings.cors_allow_headers
        response.headers["Access-Control-Allow-Methods"] = settings.cors_allow_methods
        return response

    app.include_router(devices.router, prefix="/api", tags=["devices"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "device-map"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "device_map.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
