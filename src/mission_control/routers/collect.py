"""Collection endpoints: ingest session telemetry into the snapshot store."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mission_control.dependencies import (
    get_snapshot_store,
    get_telemetry_config,
    get_upstream_client,
    verify_api_key,
)
from mission_control.schemas.agents import CollectedAgent, CollectRequest, CollectResponse
from mission_control.services.ingestion import IngestResult, ingest_sessions
from mission_control.services.snapshot_store import SnapshotStore
from mission_control.services.telemetry import TelemetryConfig
from mission_control.services.upstream import (
    UpstreamClient,
    UpstreamNotConfiguredError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/agents", tags=["collect"])


def _collect_response(result: IngestResult) -> CollectResponse:
    return CollectResponse(
        collected=[
            CollectedAgent(
                agent=s.agent,
                status=s.status,
                context_percent=s.context_percent,
            )
            for s in result.accepted
        ],
        alerts=result.alerts,
    )


@router.post("/collect", response_model=CollectResponse)
async def collect(
    body: CollectRequest,
    store: SnapshotStore = Depends(get_snapshot_store),
    config: TelemetryConfig = Depends(get_telemetry_config),
    _api_key: str = Depends(verify_api_key),
) -> CollectResponse:
    """Receive raw session records from a collector (e.g. a cron job).

    Sessions that do not belong to a known agent are skipped silently.
    """
    result = await ingest_sessions(body.sessions, store, config)
    logger.info(
        "Collected %d of %d sessions, %d alerts",
        len(result.accepted),
        len(body.sessions),
        len(result.alerts),
    )
    return _collect_response(result)


@router.post("/collect/upstream", response_model=CollectResponse)
async def collect_from_upstream(
    store: SnapshotStore = Depends(get_snapshot_store),
    config: TelemetryConfig = Depends(get_telemetry_config),
    upstream: UpstreamClient = Depends(get_upstream_client),
    _api_key: str = Depends(verify_api_key),
) -> CollectResponse:
    """Pull the current sessions from the upstream API and ingest them.

    An unreachable upstream is a 502, distinct from a successful pull that
    found no active agents.
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

    result = await ingest_sessions(records, store, config)
    return _collect_response(result)
