"""Snapshot store: append-only persistence of snapshots and alert events.

Each append runs in its own short-lived session and transaction so that one
failing write never rolls back the others in a batch. Readers pick the single
most recent row per agent and tolerate duplicates written by overlapping
collections.
"""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mission_control.models.agent_event import AgentEvent
from mission_control.models.agent_snapshot import AgentSnapshotRecord
from mission_control.schemas.agents import AgentSnapshot, AlertEvent
from mission_control.services.alerts import alert_event_payload


class SnapshotStore(Protocol):
    async def append_snapshot(self, snapshot: AgentSnapshot) -> None: ...

    async def append_alert(self, alert: AlertEvent) -> None: ...

    async def latest_snapshot(self, agent: str) -> AgentSnapshot | None: ...

    async def latest_snapshots(self, agents: Iterable[str]) -> dict[str, AgentSnapshot]: ...


async def fetch_latest_snapshot(db: AsyncSession, agent: str) -> AgentSnapshot | None:
    """Return the most recent snapshot for an agent, if any."""
    stmt = (
        select(AgentSnapshotRecord)
        .where(AgentSnapshotRecord.agent == agent)
        .order_by(AgentSnapshotRecord.snapshot_at.desc(), AgentSnapshotRecord.id.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    record = result.scalar_one_or_none()
    if record is None:
        return None
    return AgentSnapshot.model_validate(record)


async def fetch_latest_snapshots(
    db: AsyncSession, agents: Iterable[str]
) -> dict[str, AgentSnapshot]:
    """Return the current snapshot of each agent that has one, in the given order."""
    snapshots: dict[str, AgentSnapshot] = {}
    for agent in agents:
        snapshot = await fetch_latest_snapshot(db, agent)
        if snapshot is not None:
            snapshots[agent] = snapshot
    return snapshots


class SqlSnapshotStore:
    """SnapshotStore backed by the agent_snapshots and agent_events tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append_snapshot(self, snapshot: AgentSnapshot) -> None:
        async with self._session_factory() as session:
            session.add(AgentSnapshotRecord(**snapshot.model_dump()))
            await session.commit()

    async def append_alert(self, alert: AlertEvent) -> None:
        async with self._session_factory() as session:
            session.add(AgentEvent(**alert_event_payload(alert)))
            await session.commit()

    async def latest_snapshot(self, agent: str) -> AgentSnapshot | None:
        async with self._session_factory() as session:
            return await fetch_latest_snapshot(session, agent)

    async def latest_snapshots(self, agents: Iterable[str]) -> dict[str, AgentSnapshot]:
        async with self._session_factory() as session:
            return await fetch_latest_snapshots(session, agents)
