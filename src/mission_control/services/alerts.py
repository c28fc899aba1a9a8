"""Context-pressure alerting.

The evaluator itself keeps no state. Whether an agent that stays above the
threshold alerts on every ingestion cycle or only when it crosses is decided
by the configured policy, with the caller supplying the previous reading.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from mission_control.schemas.agents import AgentSnapshot, AlertEvent
from mission_control.services.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)

CONTEXT_ALERT_EVENT = "context_alert"


def evaluate_alert(
    snapshot: AgentSnapshot,
    config: TelemetryConfig,
    previous_percent: float | None = None,
    triggered_at: datetime | None = None,
) -> AlertEvent | None:
    """Return an alert when the snapshot is at or above the threshold.

    With the ``on_crossing`` policy an agent whose previous reading was
    already at or above the threshold does not alert again.
    """
    if snapshot.context_percent < config.alert_threshold:
        return None

    if (
        config.alert_policy == "on_crossing"
        and previous_percent is not None
        and previous_percent >= config.alert_threshold
    ):
        logger.debug(
            "Suppressing repeat context alert for %s at %.1f%%",
            snapshot.agent,
            snapshot.context_percent,
        )
        return None

    return AlertEvent(
        agent=snapshot.agent,
        context_percent=snapshot.context_percent,
        total_tokens=snapshot.total_tokens,
        context_tokens=snapshot.context_tokens,
        triggered_at=triggered_at or datetime.now(timezone.utc),
    )


def alert_summary(alert: AlertEvent) -> str:
    """Human-readable line stored with the audit event."""
    return (
        f"{alert.agent} reached {round(alert.context_percent)}% of its context window "
        f"({alert.total_tokens}/{alert.context_tokens} tokens)"
    )


def alert_event_payload(alert: AlertEvent) -> dict[str, Any]:
    """Column values for the agent_events row recording an alert."""
    return {
        "agent": alert.agent,
        "event_type": CONTEXT_ALERT_EVENT,
        "summary": alert_summary(alert),
        "tokens_used": alert.total_tokens,
        "event_metadata": {
            "context_percent": alert.context_percent,
            "context_tokens": alert.context_tokens,
            "triggered_at": alert.triggered_at.isoformat(),
        },
    }
