"""Read helpers for the event, task, comms and activity feeds."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.models.agent_activity import AgentActivity
from mission_control.models.agent_comm import AgentComm
from mission_control.models.agent_event import AgentEvent
from mission_control.schemas.activities import ActivityResponse
from mission_control.schemas.comms import CommResponse
from mission_control.schemas.events import EventResponse, TaskResponse

# Event types that make up the task history, and the task status each maps to
TASK_EVENT_STATUS = {
    "task_start": "running",
    "task_error": "error",
    "task_complete": "completed",
    "snapshot": "completed",
}


def event_to_response(event: AgentEvent) -> EventResponse:
    return EventResponse(
        id=event.id,
        agent=event.agent,
        event_type=event.event_type,
        summary=event.summary,
        tokens_used=event.tokens_used or 0,
        cost=float(event.cost or 0),
        metadata=event.event_metadata or {},
        created_at=event.created_at,
    )


def event_to_task(event: AgentEvent) -> TaskResponse:
    """Derive a task entry from a task_* event."""
    status = TASK_EVENT_STATUS.get(event.event_type, "completed")
    return TaskResponse(
        id=event.id,
        agent=event.agent,
        summary=event.summary or "Task without description",
        status=status,
        started_at=event.created_at,
        completed_at=None if status == "running" else event.created_at,
        tokens_used=event.tokens_used or 0,
    )


def comm_to_response(comm: AgentComm) -> CommResponse:
    return CommResponse(
        id=comm.id,
        from_agent=comm.from_agent,
        to_agent=comm.to_agent,
        message=comm.message,
        created_at=comm.created_at,
    )


def activity_to_response(activity: AgentActivity) -> ActivityResponse:
    return ActivityResponse(
        id=activity.id,
        agent=activity.agent,
        activity_type=activity.activity_type,
        summary=activity.summary,
        detail=activity.detail,
        metadata=activity.activity_metadata or {},
        created_at=activity.created_at,
    )


async def recent_events(
    db: AsyncSession, limit: int = 50, agent: str | None = None
) -> list[EventResponse]:
    """Newest events first, optionally for one agent."""
    stmt = select(AgentEvent).order_by(AgentEvent.created_at.desc()).limit(limit)
    if agent:
        stmt = stmt.where(AgentEvent.agent == agent)
    result = await db.execute(stmt)
    return [event_to_response(e) for e in result.scalars().all()]


async def recent_tasks(db: AsyncSession, limit: int = 30) -> list[TaskResponse]:
    """Task history derived from task events, newest first."""
    stmt = (
        select(AgentEvent)
        .where(AgentEvent.event_type.in_(list(TASK_EVENT_STATUS)))
        .order_by(AgentEvent.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return [event_to_task(e) for e in result.scalars().all()]


async def recent_comms(db: AsyncSession, limit: int = 30) -> list[CommResponse]:
    stmt = select(AgentComm).order_by(AgentComm.created_at.desc()).limit(limit)
    result = await db.execute(stmt)
    return [comm_to_response(c) for c in result.scalars().all()]


async def list_activities(
    db: AsyncSession,
    agent: str | None = None,
    activity_type: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ActivityResponse]:
    """One page of the activity timeline, newest first."""
    stmt = (
        select(AgentActivity)
        .order_by(AgentActivity.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    if agent:
        stmt = stmt.where(AgentActivity.agent == agent)
    if activity_type:
        stmt = stmt.where(AgentActivity.activity_type == activity_type)
    result = await db.execute(stmt)
    return [activity_to_response(a) for a in result.scalars().all()]
