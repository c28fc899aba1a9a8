"""Tests for mission_control.services.ingestion."""

from collections.abc import Iterable

import pytest

from mission_control.schemas.agents import AgentSnapshot, AlertEvent, SessionRecord
from mission_control.services.ingestion import (
    InvalidBatchError,
    ingest_sessions,
    parse_session_records,
)
from mission_control.services.telemetry import AgentRoster, TelemetryConfig

NOW = 1_760_000_000_000


class FakeStore:
    """In-memory SnapshotStore that can be told to fail for some agents."""

    def __init__(self, fail_snapshots: Iterable[str] = (), fail_alerts: Iterable[str] = ()):
        self.snapshots: list[AgentSnapshot] = []
        self.alerts: list[AlertEvent] = []
        self.fail_snapshots = set(fail_snapshots)
        self.fail_alerts = set(fail_alerts)

    async def append_snapshot(self, snapshot: AgentSnapshot) -> None:
        if snapshot.agent in self.fail_snapshots:
            raise RuntimeError("disk full")
        self.snapshots.append(snapshot)

    async def append_alert(self, alert: AlertEvent) -> None:
        if alert.agent in self.fail_alerts:
            raise RuntimeError("disk full")
        self.alerts.append(alert)

    async def latest_snapshot(self, agent: str) -> AgentSnapshot | None:
        matching = [s for s in self.snapshots if s.agent == agent]
        return matching[-1] if matching else None

    async def latest_snapshots(self, agents: Iterable[str]) -> dict[str, AgentSnapshot]:
        result = {}
        for agent in agents:
            snapshot = await self.latest_snapshot(agent)
            if snapshot is not None:
                result[agent] = snapshot
        return result


def _session(key: str, total: int, context: int = 1_000_000, **kwargs) -> SessionRecord:
    return SessionRecord(
        key=key,
        updatedAt=NOW - 60_000,
        totalTokens=total,
        contextTokens=context,
        abortedLastRun=False,
        **kwargs,
    )


class TestParseSessionRecords:
    def test_valid_batch(self):
        records = parse_session_records(
            [{"key": "agent:kai:main", "totalTokens": 5}, {"key": "agent:main:main"}]
        )
        assert [r.key for r in records] == ["agent:kai:main", "agent:main:main"]
        assert records[0].total_tokens == 5

    def test_not_a_list(self):
        with pytest.raises(InvalidBatchError, match="Expected a list"):
            parse_session_records({"sessions": []})

    def test_item_not_an_object(self):
        with pytest.raises(InvalidBatchError, match="Invalid session records"):
            parse_session_records([{"key": "agent:kai:main"}, "agent:main:main"])

    def test_unreadable_number_degrades_to_default(self):
        records = parse_session_records(
            [
                {"key": "agent:kai:main", "totalTokens": 850_000, "contextTokens": 1_000_000},
                {"key": "agent:main:main", "totalTokens": "n/a", "contextTokens": 1.5},
            ]
        )
        assert len(records) == 2
        assert records[0].total_tokens == 850_000
        assert records[1].total_tokens is None
        assert records[1].context_tokens == 1

    def test_invalid_batch_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_session_records("nope")


class TestIngestSessions:
    @pytest.mark.asyncio
    async def test_kai_scenario(self, telemetry_config: TelemetryConfig):
        store = FakeStore()
        result = await ingest_sessions(
            [_session("agent:kai:main", 850_000)], store, telemetry_config, now=NOW
        )
        assert len(result.accepted) == 1
        assert result.accepted[0].agent == "kai"
        assert result.accepted[0].status == "working"
        assert result.accepted[0].context_percent == 85.0
        assert len(result.alerts) == 1
        assert result.alerts[0].agent == "kai"
        assert result.alerts[0].context_percent == 85.0
        assert store.alerts == result.alerts

    @pytest.mark.asyncio
    async def test_unknown_key_excluded(self, telemetry_config: TelemetryConfig):
        store = FakeStore()
        result = await ingest_sessions(
            [_session("agent:unknown:main", 990_000)], store, telemetry_config, now=NOW
        )
        assert result.accepted == []
        assert result.alerts == []
        assert store.snapshots == []

    @pytest.mark.asyncio
    async def test_n_distinct_keys_yield_n_accepted(self, telemetry_config: TelemetryConfig):
        records = [
            _session("agent:main:main", 100),
            _session("agent:kai:main", 200),
            _session("agent:researcher:main", 300),
        ]
        result = await ingest_sessions(records, FakeStore(), telemetry_config, now=NOW)
        assert [s.agent for s in result.accepted] == ["noah", "kai", "dora"]

    @pytest.mark.asyncio
    async def test_empty_batch(self, telemetry_config: TelemetryConfig):
        result = await ingest_sessions([], FakeStore(), telemetry_config, now=NOW)
        assert result.accepted == []
        assert result.alerts == []

    @pytest.mark.asyncio
    async def test_failed_snapshot_write_is_isolated(self, telemetry_config: TelemetryConfig):
        store = FakeStore(fail_snapshots={"kai"})
        records = [
            _session("agent:main:main", 100),
            _session("agent:kai:main", 900_000),
            _session("agent:researcher:main", 300),
        ]
        result = await ingest_sessions(records, store, telemetry_config, now=NOW)
        assert [s.agent for s in result.accepted] == ["noah", "dora"]
        assert [s.agent for s in store.snapshots] == ["noah", "dora"]
        # The alert still reflects the observed usage
        assert [a.agent for a in result.alerts] == ["kai"]

    @pytest.mark.asyncio
    async def test_failed_alert_write_keeps_going(self, telemetry_config: TelemetryConfig):
        store = FakeStore(fail_alerts={"noah"})
        records = [
            _session("agent:main:main", 900_000),
            _session("agent:kai:main", 950_000),
        ]
        result = await ingest_sessions(records, store, telemetry_config, now=NOW)
        assert len(result.accepted) == 2
        assert [a.agent for a in result.alerts] == ["noah", "kai"]
        assert [a.agent for a in store.alerts] == ["kai"]

    @pytest.mark.asyncio
    async def test_alert_timestamp_is_cycle_time(self, telemetry_config: TelemetryConfig):
        result = await ingest_sessions(
            [_session("agent:kai:main", 900_000)], FakeStore(), telemetry_config, now=NOW
        )
        assert result.alerts[0].triggered_at == result.accepted[0].snapshot_at

    @pytest.mark.asyncio
    async def test_on_crossing_suppresses_repeat(self, roster: AgentRoster):
        config = TelemetryConfig(roster=roster, alert_policy="on_crossing")
        store = FakeStore()

        first = await ingest_sessions([_session("agent:kai:main", 850_000)], store, config, now=NOW)
        second = await ingest_sessions(
            [_session("agent:kai:main", 870_000)], store, config, now=NOW + 60_000
        )
        assert len(first.alerts) == 1
        assert second.alerts == []
        assert len(second.accepted) == 1

    @pytest.mark.asyncio
    async def test_on_crossing_alerts_again_after_dropping(self, roster: AgentRoster):
        config = TelemetryConfig(roster=roster, alert_policy="on_crossing")
        store = FakeStore()
        for total, expected in ((850_000, 1), (500_000, 0), (810_000, 1)):
            result = await ingest_sessions(
                [_session("agent:kai:main", total)], store, config, now=NOW
            )
            assert len(result.alerts) == expected

    @pytest.mark.asyncio
    async def test_every_cycle_repeats(self, telemetry_config: TelemetryConfig):
        store = FakeStore()
        for _ in range(3):
            result = await ingest_sessions(
                [_session("agent:kai:main", 850_000)], store, telemetry_config, now=NOW
            )
            assert len(result.alerts) == 1
        assert len(store.alerts) == 3
