"""Status report rendering and publishing."""

from portwatch.reporting.discord import DiscordChannel, ReportSink
from portwatch.reporting.payload import build_report, format_latency
from portwatch.reporting.reporter import ReportHandle, Reporter

__all__ = [
    "DiscordChannel",
    "ReportHandle",
    "ReportSink",
    "Reporter",
    "build_report",
    "format_latency",
]
