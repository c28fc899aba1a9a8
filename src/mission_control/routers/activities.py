"""Activity timeline endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.dependencies import get_db, verify_api_key
from mission_control.models.agent_activity import AgentActivity
from mission_control.schemas.activities import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
)
from mission_control.services.feeds import activity_to_response, list_activities

router = APIRouter(prefix="/v1/agents/activities", tags=["activities"])

MAX_PAGE_SIZE = 100


@router.get("", response_model=ActivityListResponse)
async def get_activities(
    agent: str | None = None,
    activity_type: str | None = Query(default=None, alias="type"),
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> ActivityListResponse:
    """Paginated activity timeline, newest first. Page size is capped at 100."""
    activities = await list_activities(
        db,
        agent=agent,
        activity_type=activity_type,
        limit=min(limit, MAX_PAGE_SIZE),
        offset=offset,
    )
    return ActivityListResponse(activities=activities, count=len(activities))


@router.post(
    "",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    body: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> ActivityResponse:
    """Record an activity on the timeline."""
    activity = AgentActivity(
        agent=body.agent,
        activity_type=body.activity_type,
        summary=body.summary,
        detail=body.detail,
        activity_metadata=body.metadata,
    )
    db.add(activity)
    await db.flush()

    return activity_to_response(activity)
