"""FastAPI application factory and entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from mission_control import __version__
from mission_control.config import Settings, get_settings
from mission_control.db.engine import dispose_engine, init_db
from mission_control.routers import (
    activities,
    agents,
    collect,
    comms,
    events,
    health,
    kill,
    proxy,
    status,
)
from mission_control.services.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    status.router,
    collect.router,
    events.router,
    comms.router,
    activities.router,
    kill.router,
    agents.router,
    proxy.router,
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Cache-Control": "no-store",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, check settings and prepare the database."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.environment == "development" else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Mission Control API v%s in %s mode", __version__, settings.environment)

    settings.validate_production()

    # A broken roster or alert policy should stop startup, not the first request
    config = TelemetryConfig.from_settings(settings)
    logger.info(
        "Monitoring %s; alert at %.1f%% (%s)",
        ", ".join(config.roster.order),
        config.alert_threshold,
        config.alert_policy,
    )

    if settings.environment == "development":
        await init_db()
        logger.info("Database tables created/verified")

    yield

    await dispose_engine()
    logger.info("Mission Control API shut down")


def _docs_kwargs(settings: Settings) -> dict:
    # Interactive docs only outside production-like environments
    if settings.environment == "development":
        return {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    return {"docs_url": None, "redoc_url": None, "openapi_url": None}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Mission Control API",
        description="Status, context pressure and activity of a team of AI agents",
        version=__version__,
        lifespan=lifespan,
        **_docs_kwargs(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Api-Key"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mission_control.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment == "development"),
    )
