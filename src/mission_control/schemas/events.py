"""Schemas for agent events, tasks and kill requests."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    """Request body for POST /v1/agents/events."""

    agent: str = Field(min_length=1, max_length=64)
    event_type: str = Field(min_length=1, max_length=64, alias="eventType")
    summary: str | None = None
    tokens_used: int = Field(default=0, ge=0, alias="tokensUsed")
    cost: float = Field(default=0.0, ge=0.0)
    metadata: dict = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class EventResponse(BaseModel):
    """A single logged event."""

    id: str
    agent: str
    event_type: str
    summary: str | None
    tokens_used: int
    cost: float
    metadata: dict
    created_at: datetime


class TaskResponse(BaseModel):
    """A task entry derived from task_* events."""

    id: str
    agent: str
    summary: str
    status: Literal["running", "error", "completed"]
    started_at: datetime
    completed_at: datetime | None
    tokens_used: int


class KillRequest(BaseModel):
    """Request body for POST /v1/agents/kill."""

    agent: str = Field(min_length=1, max_length=64)
    reason: str | None = Field(default=None, max_length=512)


class KillResponse(BaseModel):
    """Response for POST /v1/agents/kill."""

    ok: bool = True
    message: str
