"""Live agent status straight from the upstream session source."""

from fastapi import APIRouter, Depends, HTTPException, status

from mission_control.dependencies import get_telemetry_config, get_upstream_client
from mission_control.schemas.agents import AgentStatusResponse
from mission_control.services.aggregation import summarize
from mission_control.services.telemetry import (
    TelemetryConfig,
    ms_to_datetime,
    normalize_sessions,
    now_ms,
)
from mission_control.services.upstream import (
    UpstreamClient,
    UpstreamNotConfiguredError,
    UpstreamUnavailableError,
)

router = APIRouter(prefix="/v1/agents", tags=["status"])


@router.get("/status", response_model=AgentStatusResponse)
async def get_live_status(
    config: TelemetryConfig = Depends(get_telemetry_config),
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> AgentStatusResponse:
    """Normalize the upstream's current sessions without storing anything.

    The upstream token stays server-side.
    """
    try:
        records = await upstream.fetch_sessions()
    except UpstreamNotConfiguredError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except UpstreamUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    now = now_ms()
    snapshots = normalize_sessions(records, config, now)
    ordered = {agent: snapshots[agent] for agent in config.roster.ordered(snapshots)}

    return AgentStatusResponse(
        agents=ordered,
        summary=summarize(ordered, config.roster),
        fetched_at=ms_to_datetime(now),
    )
