"""Monitoring loop."""

from portwatch.monitor.models import CycleResult
from portwatch.monitor.runner import Monitor, create_monitor

__all__ = ["CycleResult", "Monitor", "create_monitor"]
