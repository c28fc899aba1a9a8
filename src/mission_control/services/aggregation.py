"""Team summary aggregation and presentation status.

Summaries are always recomputed from the current snapshots; nothing here is
cached or persisted.
"""

from collections.abc import Mapping
from datetime import datetime, timezone

from mission_control.schemas.agents import AgentSnapshot, TeamSummary
from mission_control.services.telemetry import AgentRoster, round_percent


def summarize(snapshots: Mapping[str, AgentSnapshot], roster: AgentRoster) -> TeamSummary:
    """Compute totals, average and maximum context usage across agents.

    Agents are visited in roster order so that ties on the maximum always go
    to the same agent. Agents absent from the mapping are not counted.
    """
    if not snapshots:
        return TeamSummary()

    ordered = [snapshots[agent] for agent in roster.ordered(snapshots)]

    max_agent = ordered[0].agent
    max_pct = ordered[0].context_percent
    for snapshot in ordered[1:]:
        if snapshot.context_percent > max_pct:
            max_agent = snapshot.agent
            max_pct = snapshot.context_percent

    total_pct = sum(s.context_percent for s in ordered)

    return TeamSummary(
        total_tokens=sum(s.total_tokens for s in ordered),
        agent_count=len(ordered),
        max_context_agent=max_agent,
        max_context_pct=max_pct,
        avg_context=round_percent(total_pct / len(ordered)),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def presence_statuses(
    snapshots: Mapping[str, AgentSnapshot],
    roster: AgentRoster,
    now: datetime | None = None,
    offline_after_ms: int = 0,
) -> dict[str, str]:
    """Display status for every roster agent.

    Agents without a current snapshot are ``offline``. When
    ``offline_after_ms`` is positive, so are agents whose latest snapshot is
    older than that.
    """
    now = now or datetime.now(timezone.utc)
    statuses: dict[str, str] = {}
    for agent in roster.ordered([*roster.order, *snapshots]):
        snapshot = snapshots.get(agent)
        if snapshot is None:
            statuses[agent] = "offline"
            continue
        age_ms = (now - _as_utc(snapshot.snapshot_at)).total_seconds() * 1000
        if offline_after_ms > 0 and age_ms > offline_after_ms:
            statuses[agent] = "offline"
        else:
            statuses[agent] = snapshot.status
    return statuses
