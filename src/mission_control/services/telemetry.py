"""Telemetry normalization: raw session records to agent snapshots.

Everything here is pure. The roster and thresholds arrive through
``TelemetryConfig`` (built from settings at the edge), and "now" is passed in
explicitly so results are reproducible.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

from mission_control.config import Settings
from mission_control.schemas.agents import AgentSnapshot, SessionRecord

ALERT_POLICIES = ("every_cycle", "on_crossing")


@dataclass(frozen=True)
class AgentRoster:
    """Known agents: session key lookup plus a fixed display order.

    ``order`` drives iteration everywhere a deterministic agent order is
    needed (dashboard reads, summary tie-breaks).
    """

    session_keys: Mapping[str, str]
    order: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(set(self.order)) != len(self.order):
            raise ValueError(f"Agent order contains duplicates: {list(self.order)}")
        object.__setattr__(self, "session_keys", MappingProxyType(dict(self.session_keys)))

    @classmethod
    def build(cls, session_keys: Mapping[str, str], order: Iterable[str] = ()) -> "AgentRoster":
        """Build a roster, appending mapped agents missing from ``order``."""
        full_order = list(order)
        for agent in session_keys.values():
            if agent not in full_order:
                full_order.append(agent)
        return cls(session_keys=session_keys, order=tuple(full_order))

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentRoster":
        return cls.build(settings.agent_roster, settings.agent_order)

    def agent_for(self, session_key: str | None) -> str | None:
        """Return the agent for a session key, or None when unmapped."""
        if not session_key:
            return None
        return self.session_keys.get(session_key)

    def ordered(self, agents: Iterable[str]) -> list[str]:
        """Sort agent ids by roster order; unknown ids follow, alphabetically."""
        present = set(agents)
        known = [a for a in self.order if a in present]
        extra = sorted(present.difference(self.order))
        return known + extra


@dataclass(frozen=True)
class TelemetryConfig:
    """Tunables of the normalizer and alert evaluator."""

    roster: AgentRoster
    recency_window_ms: int = 10 * 60 * 1000
    default_context_tokens: int = 1_000_000
    alert_threshold: float = 80.0
    alert_policy: str = "every_cycle"
    offline_after_ms: int = 0

    def __post_init__(self) -> None:
        if self.alert_policy not in ALERT_POLICIES:
            raise ValueError(
                f"Unknown alert policy {self.alert_policy!r}, expected one of {ALERT_POLICIES}"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            roster=AgentRoster.from_settings(settings),
            recency_window_ms=settings.recency_window_seconds * 1000,
            default_context_tokens=settings.default_context_tokens,
            alert_threshold=settings.context_alert_threshold,
            alert_policy=settings.context_alert_policy,
            offline_after_ms=settings.offline_after_seconds * 1000,
        )


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def ms_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def round_percent(value: float) -> float:
    """Round to one decimal, halves away from zero.

    Works on the shortest decimal repr of the float: 79.95 gives 80.0.
    """
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_context_percent(total_tokens: int | None, context_tokens: int | None) -> float:
    """Share of the context window in use, in percent with one decimal.

    Zero when either count is missing or the window is not positive.
    """
    if total_tokens is None or context_tokens is None or context_tokens <= 0:
        return 0.0
    return round_percent(max(total_tokens, 0) * 100 / context_tokens)


def derive_status(
    updated_at: int | None,
    aborted_last_run: bool | None,
    now: int,
    recency_window_ms: int,
) -> str:
    """Classify a session as working, online or idle.

    A session without an activity timestamp counts as stale.
    """
    if updated_at is None or now - updated_at > recency_window_ms:
        return "idle"
    if aborted_last_run is False:
        return "working"
    return "online"


def normalize_session(
    record: SessionRecord,
    config: TelemetryConfig,
    now: int,
    snapshot_at: datetime | None = None,
) -> AgentSnapshot | None:
    """Turn one session record into a snapshot, or None for unknown sessions."""
    agent = config.roster.agent_for(record.key)
    if agent is None:
        return None

    total_tokens = record.total_tokens if record.total_tokens and record.total_tokens > 0 else 0

    if record.context_tokens is None:
        context_tokens = config.default_context_tokens
    else:
        context_tokens = max(record.context_tokens, 0)

    return AgentSnapshot(
        agent=agent,
        session_key=record.key,
        status=derive_status(
            record.updated_at, record.aborted_last_run, now, config.recency_window_ms
        ),
        model=record.model or None,
        total_tokens=total_tokens,
        context_tokens=context_tokens,
        context_percent=compute_context_percent(total_tokens, context_tokens),
        last_message_at=ms_to_datetime(record.updated_at) if record.updated_at else None,
        last_channel=record.last_channel or None,
        current_task=record.current_task or None,
        snapshot_at=snapshot_at or ms_to_datetime(now),
    )


def normalize_sessions(
    records: Iterable[SessionRecord],
    config: TelemetryConfig,
    now: int,
) -> dict[str, AgentSnapshot]:
    """Normalize a batch, keeping the last snapshot seen for each agent."""
    snapshots: dict[str, AgentSnapshot] = {}
    for record in records:
        snapshot = normalize_session(record, config, now)
        if snapshot is not None:
            snapshots[snapshot.agent] = snapshot
    return snapshots
