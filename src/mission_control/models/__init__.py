"""SQLAlchemy ORM models."""

from mission_control.models.base import Base
from mission_control.models.agent_snapshot import AgentSnapshotRecord
from mission_control.models.agent_event import AgentEvent
from mission_control.models.agent_comm import AgentComm
from mission_control.models.agent_activity import AgentActivity

__all__ = [
    "Base",
    "AgentSnapshotRecord",
    "AgentEvent",
    "AgentComm",
    "AgentActivity",
]
