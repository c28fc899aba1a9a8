"""Schemas for agent telemetry, snapshots and team summaries."""

import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from mission_control.schemas.comms import CommResponse
from mission_control.schemas.events import EventResponse, TaskResponse

SnapshotStatus = Literal["working", "online", "idle"]
AgentStatus = Literal["working", "online", "idle", "offline"]


class SessionRecord(BaseModel):
    """One session as reported by the upstream session source.

    Field names follow the upstream wire format (camelCase); snake_case
    names are accepted too. Every field is optional: records without a key
    are dropped during normalization, missing numbers fall back to defaults.
    """

    key: str | None = None
    updated_at: int | None = Field(default=None, alias="updatedAt")
    total_tokens: int | None = Field(default=None, alias="totalTokens")
    context_tokens: int | None = Field(default=None, alias="contextTokens")
    model: str | None = None
    aborted_last_run: bool | None = Field(default=None, alias="abortedLastRun")
    last_channel: str | None = Field(default=None, alias="lastChannel")
    current_task: str | None = Field(default=None, alias="currentTask")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("updated_at", "total_tokens", "context_tokens", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> int | None:
        """Numbers that cannot be read become None and take the normalizer defaults."""
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float):
            return int(v) if math.isfinite(v) else None
        if isinstance(v, str):
            try:
                return int(float(v.strip()))
            except (ValueError, OverflowError):
                return None
        return None


class AgentSnapshot(BaseModel):
    """Point-in-time derived status of one agent."""

    agent: str
    session_key: str
    status: SnapshotStatus
    model: str | None = None
    total_tokens: int = 0
    context_tokens: int = 0
    context_percent: float = 0.0
    last_message_at: datetime | None = None
    last_channel: str | None = None
    current_task: str | None = None
    snapshot_at: datetime

    model_config = {"frozen": True, "from_attributes": True}


class AlertEvent(BaseModel):
    """Context-pressure alert for one agent in one ingestion cycle."""

    agent: str
    context_percent: float
    total_tokens: int
    context_tokens: int
    triggered_at: datetime

    model_config = {"frozen": True}


class TeamSummary(BaseModel):
    """Team-level statistics derived from the current snapshots."""

    total_tokens: int = 0
    agent_count: int = 0
    max_context_agent: str | None = None
    max_context_pct: float = 0.0
    avg_context: float = 0.0


# ── Collection ───────────────────────────────────────────────────────


class CollectRequest(BaseModel):
    """Batch of raw session records pushed by a collector."""

    sessions: list[SessionRecord]


class CollectedAgent(BaseModel):
    """Short form of an accepted snapshot."""

    agent: str
    status: SnapshotStatus
    context_percent: float


class CollectResponse(BaseModel):
    """Response for POST /v1/agents/collect."""

    ok: bool = True
    collected: list[CollectedAgent]
    alerts: list[AlertEvent]


class SnapshotPush(BaseModel):
    """A snapshot computed by an external collector."""

    agent: str = Field(min_length=1, max_length=64)
    session_key: str = Field(min_length=1, max_length=255, alias="sessionKey")
    status: SnapshotStatus
    model: str | None = Field(default=None, max_length=128)
    total_tokens: int = Field(default=0, ge=0, alias="totalTokens")
    context_tokens: int | None = Field(default=None, alias="contextTokens")
    last_message_at: datetime | None = Field(default=None, alias="lastMessageAt")
    last_channel: str | None = Field(default=None, max_length=128, alias="lastChannel")
    current_task: str | None = Field(default=None, alias="currentTask")

    model_config = {"populate_by_name": True}


class SnapshotPushRequest(BaseModel):
    """Request body for POST /v1/agents."""

    agents: list[SnapshotPush] = Field(max_length=100)


class SnapshotPushResponse(BaseModel):
    """Response for POST /v1/agents."""

    ok: bool = True
    count: int


# ── Reads ────────────────────────────────────────────────────────────


class AgentStatusResponse(BaseModel):
    """Response for GET /v1/agents/status (live upstream view)."""

    agents: dict[str, AgentSnapshot]
    summary: TeamSummary
    fetched_at: datetime


class DashboardResponse(BaseModel):
    """Response for GET /v1/agents."""

    agents: dict[str, AgentSnapshot]
    statuses: dict[str, AgentStatus]
    events: list[EventResponse]
    tasks: list[TaskResponse]
    comms: list[CommResponse]
    summary: TeamSummary
