"""Render the status report as a Discord message payload."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from portwatch.status.classifier import overall_status
from portwatch.status.models import EndpointStatus

EMBED_COLOR = 0x2F3136
SUMMARY_TITLE = "Server Status Summary"
DETAILS_TITLE = "Server Details"


def format_latency(latency_ms: float | None) -> str:
    if latency_ms is None:
        return "N/A"
    return f"{round(latency_ms)} ms"


def _relative_timestamp(moment: datetime) -> str:
    return f"<t:{int(moment.timestamp())}:R>"


def build_report(
    statuses: Sequence[EndpointStatus],
    interval: float,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the summary and details embeds for one cycle."""
    now = now or datetime.now(UTC)
    next_update = now + timedelta(seconds=interval)
    overall = overall_status(s.status for s in statuses)

    summary = {
        "title": SUMMARY_TITLE,
        "description": (
            f"**Overall Status:** {overall.summary_label}\n\n"
            f"Last updated: {_relative_timestamp(now)}\n"
            f"Next update: {_relative_timestamp(next_update)}"
        ),
        "color": EMBED_COLOR,
    }
    details = {
        "title": DETAILS_TITLE,
        "fields": [
            {
                "name": s.name,
                "value": f"{s.status.label} | Ping: {format_latency(s.latency_ms)}",
                "inline": True,
            }
            for s in statuses
        ],
        "color": EMBED_COLOR,
    }
    return {"embeds": [summary, details]}
