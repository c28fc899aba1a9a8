"""Initial schema - snapshots, events, comms and activities.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Agent snapshots - append-only status observations
    op.create_table(
        "agent_snapshots",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("agent", sa.String(64), nullable=False),
        sa.Column("session_key", sa.String(255), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("model", sa.String(128), nullable=True),
        sa.Column("total_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("context_tokens", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("context_percent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_channel", sa.String(128), nullable=True),
        sa.Column("current_task", sa.Text(), nullable=True),
        sa.Column("snapshot_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_agent_snapshots_agent_snapshot_at",
        "agent_snapshots",
        ["agent", "snapshot_at"],
    )

    # Agent events - audit log, context alerts, task transitions
    op.create_table(
        "agent_events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("agent", sa.String(64), nullable=False),
        sa.Column("event_type", sa.String(64), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("tokens_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("metadata", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_agent_events_created_at", "agent_events", ["created_at"])
    op.create_index("ix_agent_events_agent_type", "agent_events", ["agent", "event_type"])

    # Agent comms - messages between agents
    op.create_table(
        "agent_comms",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("from_agent", sa.String(64), nullable=False),
        sa.Column("to_agent", sa.String(64), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_agent_comms_created_at", "agent_comms", ["created_at"])

    # Agent activities - typed timeline entries
    op.create_table(
        "agent_activities",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("agent", sa.String(64), nullable=False),
        sa.Column("activity_type", sa.String(32), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("metadata", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_agent_activities_agent", "agent_activities", ["agent"])
    op.create_index("ix_agent_activities_activity_type", "agent_activities", ["activity_type"])
    op.create_index("ix_agent_activities_created_at", "agent_activities", ["created_at"])


def downgrade() -> None:
    op.drop_table("agent_activities")
    op.drop_table("agent_comms")
    op.drop_table("agent_events")
    op.drop_table("agent_snapshots")
