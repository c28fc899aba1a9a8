"""AgentSnapshotRecord model: append-only per-agent status observations."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mission_control.models.base import Base


class AgentSnapshotRecord(Base):
    __tablename__ = "agent_snapshots"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    agent: Mapped[str] = mapped_column(String(64), nullable=False)
    session_key: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    model: Mapped[str | None] = mapped_column(String(128), nullable=True)
    total_tokens: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default="0"
    )
    context_tokens: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default="0"
    )
    context_percent: Mapped[float] = mapped_column(
        Float, nullable=False, server_default="0"
    )
    last_message_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_channel: Mapped[str | None] = mapped_column(String(128), nullable=True)
    current_task: Mapped[str | None] = mapped_column(Text, nullable=True)
    snapshot_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_agent_snapshots_agent_snapshot_at", "agent", "snapshot_at"),
    )
