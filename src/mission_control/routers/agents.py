"""Dashboard read and snapshot push endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.config import Settings
from mission_control.dependencies import (
    get_app_settings,
    get_db,
    get_telemetry_config,
    verify_api_key,
)
from mission_control.models.agent_snapshot import AgentSnapshotRecord
from mission_control.schemas.agents import (
    DashboardResponse,
    SnapshotPushRequest,
    SnapshotPushResponse,
)
from mission_control.services.aggregation import presence_statuses, summarize
from mission_control.services.feeds import recent_comms, recent_events, recent_tasks
from mission_control.services.snapshot_store import fetch_latest_snapshots
from mission_control.services.telemetry import TelemetryConfig, compute_context_percent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/agents", tags=["agents"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    config: TelemetryConfig = Depends(get_telemetry_config),
    settings: Settings = Depends(get_app_settings),
) -> DashboardResponse:
    """Current snapshot per agent, recent activity and the team summary.

    Agents without a snapshot are reported as offline and left out of the
    summary.
    """
    snapshots = await fetch_latest_snapshots(db, config.roster.order)

    return DashboardResponse(
        agents=snapshots,
        statuses=presence_statuses(
            snapshots,
            config.roster,
            now=datetime.now(timezone.utc),
            offline_after_ms=config.offline_after_ms,
        ),
        events=await recent_events(db, limit=settings.dashboard_event_limit),
        tasks=await recent_tasks(db, limit=settings.dashboard_task_limit),
        comms=await recent_comms(db, limit=settings.dashboard_comms_limit),
        summary=summarize(snapshots, config.roster),
    )


@router.post("", response_model=SnapshotPushResponse)
async def push_snapshots(
    body: SnapshotPushRequest,
    db: AsyncSession = Depends(get_db),
    config: TelemetryConfig = Depends(get_telemetry_config),
    _api_key: str = Depends(verify_api_key),
) -> SnapshotPushResponse:
    """Store snapshots already computed by an external collector."""
    snapshot_at = datetime.now(timezone.utc)

    for item in body.agents:
        context_tokens = (
            config.default_context_tokens
            if item.context_tokens is None
            else max(item.context_tokens, 0)
        )
        db.add(
            AgentSnapshotRecord(
                agent=item.agent,
                session_key=item.session_key,
                status=item.status,
                model=item.model,
                total_tokens=item.total_tokens,
                context_tokens=context_tokens,
                context_percent=compute_context_percent(item.total_tokens, context_tokens),
                last_message_at=item.last_message_at,
                last_channel=item.last_channel,
                current_task=item.current_task,
                snapshot_at=snapshot_at,
            )
        )

    await db.flush()
    logger.debug("Stored %d pushed snapshots", len(body.agents))

    return SnapshotPushResponse(count=len(body.agents))
