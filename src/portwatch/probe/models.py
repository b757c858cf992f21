"""Data models for probe results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PortState(str, Enum):
    """Outcome of a port reachability check.

    UNCONFIRMED is what a UDP check reports when the datagram left without a
    send error. UDP has no handshake, so this only means nothing refused it.
    """

    OPEN = "open"
    CLOSED = "closed"
    UNCONFIRMED = "unconfirmed"

    @property
    def reachable(self) -> bool:
        return self is not PortState.CLOSED


@dataclass(frozen=True)
class ProbeResult:
    """Result of one probe pass against a single endpoint."""

    name: str
    latency_ms: Optional[float] = None
    port_state: PortState = PortState.CLOSED

    @property
    def reachable(self) -> bool:
        return self.port_state.reachable

    @classmethod
    def unreachable(cls, name: str) -> ProbeResult:
        return cls(name=name, latency_ms=None, port_state=PortState.CLOSED)
