"""FastAPI dependency injection functions."""

import hmac
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.config import Settings, get_settings
from mission_control.db.engine import get_session, get_session_factory
from mission_control.services.snapshot_store import SnapshotStore, SqlSnapshotStore
from mission_control.services.telemetry import TelemetryConfig
from mission_control.services.upstream import UpstreamClient


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async for session in get_session():
        yield session


def get_app_settings() -> Settings:
    """Return application settings."""
    return get_settings()


def get_telemetry_config(
    settings: Settings = Depends(get_app_settings),
) -> TelemetryConfig:
    """Roster and thresholds for the telemetry core."""
    return TelemetryConfig.from_settings(settings)


def get_snapshot_store() -> SnapshotStore:
    """Return the SQL-backed snapshot store."""
    return SqlSnapshotStore(get_session_factory())


def get_upstream_client(
    settings: Settings = Depends(get_app_settings),
) -> UpstreamClient:
    """Return a client for the upstream agent API."""
    return UpstreamClient.from_settings(settings)


async def verify_api_key(
    x_api_key: str | None = Header(default=None, description="<api_key>"),
    authorization: str | None = Header(default=None, description="Bearer <api_key>"),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """Verify the shared API key on write endpoints.

    Accepts either an ``X-Api-Key`` header or ``Authorization: Bearer``.
    """
    raw_key = x_api_key
    if raw_key is None and authorization is not None:
        if not authorization.startswith("Bearer "):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authorization header must use Bearer scheme",
            )
        raw_key = authorization[7:].strip()

    if not raw_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is required",
        )

    # Timing-safe comparison to prevent timing side-channel attacks
    if not hmac.compare_digest(raw_key.encode(), settings.api_key.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return raw_key
