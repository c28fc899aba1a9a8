"""Batch ingestion of session telemetry.

Records are processed one at a time: normalize, persist the snapshot,
evaluate the context alert, persist the alert. A failed write only drops
that record's snapshot (or alert record) and the batch carries on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter, ValidationError

from mission_control.schemas.agents import AgentSnapshot, AlertEvent, SessionRecord
from mission_control.services.alerts import evaluate_alert
from mission_control.services.snapshot_store import SnapshotStore
from mission_control.services.telemetry import (
    TelemetryConfig,
    ms_to_datetime,
    normalize_session,
    now_ms,
)

logger = logging.getLogger(__name__)

_session_records = TypeAdapter(list[SessionRecord])


class InvalidBatchError(ValueError):
    """The batch does not have the shape of a list of session records."""


@dataclass
class IngestResult:
    accepted: list[AgentSnapshot] = field(default_factory=list)
    alerts: list[AlertEvent] = field(default_factory=list)


def parse_session_records(raw: Any) -> list[SessionRecord]:
    """Validate a raw batch before any record is processed."""
    if not isinstance(raw, list):
        raise InvalidBatchError(
            f"Expected a list of session records, got {type(raw).__name__}"
        )
    try:
        return _session_records.validate_python(raw)
    except ValidationError as exc:
        raise InvalidBatchError(f"Invalid session records: {exc}") from exc


async def ingest_sessions(
    records: list[SessionRecord],
    store: SnapshotStore,
    config: TelemetryConfig,
    now: int | None = None,
) -> IngestResult:
    """Normalize, store and alert on a batch of session records."""
    now = now_ms() if now is None else now
    triggered_at = ms_to_datetime(now)
    result = IngestResult()

    for record in records:
        snapshot = normalize_session(record, config, now)
        if snapshot is None:
            logger.debug("Skipping session %r: not on the roster", record.key)
            continue

        previous_percent = None
        if config.alert_policy == "on_crossing":
            try:
                previous = await store.latest_snapshot(snapshot.agent)
            except Exception:
                logger.exception("Could not load previous snapshot for %s", snapshot.agent)
                previous = None
            if previous is not None:
                previous_percent = previous.context_percent

        try:
            await store.append_snapshot(snapshot)
        except Exception:
            logger.exception("Failed to store snapshot for %s", snapshot.agent)
        else:
            result.accepted.append(snapshot)

        alert = evaluate_alert(snapshot, config, previous_percent, triggered_at)
        if alert is None:
            continue

        result.alerts.append(alert)
        logger.info(
            "Context alert: %s at %.1f%% (%d/%d tokens)",
            alert.agent,
            alert.context_percent,
            alert.total_tokens,
            alert.context_tokens,
        )
        try:
            await store.append_alert(alert)
        except Exception:
            logger.exception("Failed to record context alert for %s", alert.agent)

    return result
