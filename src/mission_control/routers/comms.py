"""Inter-agent communication log endpoints."""

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mission_control.dependencies import get_db, verify_api_key
from mission_control.models.agent_comm import AgentComm
from mission_control.schemas.comms import CommBatchResponse, CommCreate, CommResponse
from mission_control.services.feeds import recent_comms

router = APIRouter(prefix="/v1/agents/comms", tags=["comms"])


@router.post(
    "",
    response_model=CommBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comms(
    body: CommCreate | list[CommCreate] = Body(...),
    db: AsyncSession = Depends(get_db),
    _api_key: str = Depends(verify_api_key),
) -> CommBatchResponse:
    """Log a single message or a batch of messages."""
    comms = body if isinstance(body, list) else [body]

    for comm in comms:
        row = AgentComm(
            from_agent=comm.from_agent,
            to_agent=comm.to_agent,
            message=comm.message,
        )
        if comm.created_at is not None:
            row.created_at = comm.created_at
        db.add(row)

    await db.flush()
    return CommBatchResponse(count=len(comms))


@router.get("", response_model=list[CommResponse])
async def list_comms(
    limit: int = Query(default=30, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[CommResponse]:
    """Most recent messages, newest first."""
    return await recent_comms(db, limit=limit)
