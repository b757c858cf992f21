"""Endpoint probing."""

from portwatch.probe.checks import (
    check_tcp_port,
    check_udp_port,
    measure_latency,
    probe,
    probe_all,
    probe_endpoint,
)
from portwatch.probe.models import PortState, ProbeResult

__all__ = [
    "PortState",
    "ProbeResult",
    "check_tcp_port",
    "check_udp_port",
    "measure_latency",
    "probe",
    "probe_all",
    "probe_endpoint",
]
