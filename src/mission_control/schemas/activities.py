"""Schemas for the activity timeline."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ActivityType = Literal[
    "deploy",
    "research",
    "bugfix",
    "communication",
    "edit",
    "task_complete",
    "task_start",
    "git_commit",
    "error",
    "system",
]


class ActivityCreate(BaseModel):
    """Request body for POST /v1/agents/activities."""

    agent: str = Field(min_length=1, max_length=64)
    activity_type: ActivityType
    summary: str = Field(min_length=1)
    detail: str | None = None
    metadata: dict = Field(default_factory=dict)


class ActivityResponse(BaseModel):
    """A single activity entry."""

    id: str
    agent: str
    activity_type: str
    summary: str
    detail: str | None
    metadata: dict
    created_at: datetime


class ActivityListResponse(BaseModel):
    """Response for GET /v1/agents/activities."""

    activities: list[ActivityResponse]
    count: int
