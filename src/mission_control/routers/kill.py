"""Kill switch: ask an agent to stop on its next cycle."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.dependencies import get_db, verify_api_key
from mission_control.models.agent_event import AgentEvent
from mission_control.schemas.events import KillRequest, KillResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/agents", tags=["kill"])

KILL_REQUEST_EVENT = "kill_request"


@router.post("/kill", response_model=KillResponse)
async def request_kill(
    body: KillRequest,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> KillResponse:
    """Log a kill request; the agent's runner picks it up on its next cycle."""
    requested_at = datetime.now(timezone.utc)
    db.add(
        AgentEvent(
            agent=body.agent,
            event_type=KILL_REQUEST_EVENT,
            summary=f"Kill switch triggered: {body.reason or 'no reason given'}",
            event_metadata={
                "reason": body.reason,
                "requested_at": requested_at.isoformat(),
            },
        )
    )
    await db.flush()
    logger.warning("Kill request logged for %s", body.agent)

    return KillResponse(
        message=f"Kill request logged for {body.agent}. Will be processed on next cron cycle.",
    )
