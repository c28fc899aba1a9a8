"""Schemas for inter-agent communication logs."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommCreate(BaseModel):
    """One message between two agents."""

    from_agent: str = Field(min_length=1, max_length=64, alias="from")
    to_agent: str = Field(min_length=1, max_length=64, alias="to")
    message: str = Field(min_length=1)
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = {"populate_by_name": True}


class CommBatchResponse(BaseModel):
    """Response for POST /v1/agents/comms."""

    ok: bool = True
    count: int


class CommResponse(BaseModel):
    """A logged message."""

    id: str
    from_agent: str
    to_agent: str
    message: str
    created_at: datetime
