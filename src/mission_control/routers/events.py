"""Agent event log endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.dependencies import get_db, verify_api_key
from mission_control.models.agent_event import AgentEvent
from mission_control.schemas.events import EventCreate, EventResponse
from mission_control.services.feeds import event_to_response, recent_events

router = APIRouter(prefix="/v1/agents/events", tags=["events"])


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> EventResponse:
    """Log an agent event."""
    event = AgentEvent(
        agent=body.agent,
        event_type=body.event_type,
        summary=body.summary,
        tokens_used=body.tokens_used,
        cost=body.cost,
        event_metadata=body.metadata,
    )
    db.add(event)
    await db.flush()

    return event_to_response(event)


@router.get("", response_model=list[EventResponse])
async def list_events(
    agent: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    """Most recent events, newest first."""
    return await recent_events(db, limit=limit, agent=agent)
