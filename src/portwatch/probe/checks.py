"""Async latency and port reachability checks."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
import sys
from collections.abc import Awaitable, Callable, Sequence

from portwatch.config.models import EndpointEntry, MonitorSettings, Protocol
from portwatch.errors import ProbeError
from portwatch.probe.models import PortState, ProbeResult

logger = logging.getLogger(__name__)

Prober = Callable[[EndpointEntry, MonitorSettings], Awaitable[ProbeResult]]

_RTT_PATTERN = re.compile(r"time[=<]\s*([\d.]+)\s*ms", re.IGNORECASE)


def _ping_command(address: str, timeout: float) -> list[str]:
    """Build a single-echo ping command line for the current platform."""
    if sys.platform == "win32":
        return ["ping", "-n", "1", "-w", str(int(timeout * 1000)), address]
    if sys.platform == "darwin":
        return ["ping", "-c", "1", "-t", str(max(1, round(timeout))), address]
    return ["ping", "-c", "1", "-W", str(max(1, round(timeout))), address]


def parse_rtt(output: str) -> float | None:
    """Extract the round-trip time in ms from ping output."""
    match = _RTT_PATTERN.search(output)
    if match is None:
        return None
    return float(match.group(1))


async def _ping_once(address: str, timeout: float) -> float:
    try:
        proc = await asyncio.create_subprocess_exec(
            *_ping_command(address, timeout),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ProbeError(f"Could not run ping: {exc}") from exc

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout + 1.0)
    except TimeoutError:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        raise ProbeError(f"Ping to {address} timed out") from None

    if proc.returncode != 0:
        raise ProbeError(f"No echo reply from {address}")
    rtt = parse_rtt(stdout.decode(errors="replace"))
    if rtt is None:
        raise ProbeError(f"Could not read round-trip time for {address}")
    return rtt


async def measure_latency(address: str, timeout: float = 2.0) -> float | None:
    """Send one echo request. Returns the round-trip time in ms, or None."""
    try:
        return await _ping_once(address, timeout)
    except ProbeError as exc:
        logger.debug("Latency probe failed: %s", exc)
        return None


async def check_tcp_port(address: str, port: int, timeout: float = 3.0) -> PortState:
    """Attempt a TCP handshake. OPEN on connect, CLOSED on timeout or error."""
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(address, port),
            timeout=timeout,
        )
    except (TimeoutError, OSError):
        return PortState.CLOSED
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()
    return PortState.OPEN


class _DatagramSendProtocol(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.error: Exception | None = None

    def error_received(self, exc: Exception) -> None:
        self.error = exc


async def _send_empty_datagram(address: str, port: int) -> PortState:
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(
        _DatagramSendProtocol,
        remote_addr=(address, port),
    )
    try:
        transport.sendto(b"")
        # Let the loop deliver an immediate send error, if any.
        await asyncio.sleep(0)
    finally:
        transport.close()
    return PortState.CLOSED if protocol.error is not None else PortState.UNCONFIRMED


async def check_udp_port(address: str, port: int, timeout: float = 3.0) -> PortState:
    """Send a zero-length datagram.

    UDP has no handshake: a send without error is reported as UNCONFIRMED,
    never OPEN. Errors, resolution failures and timeouts are CLOSED.
    """
    try:
        return await asyncio.wait_for(_send_empty_datagram(address, port), timeout=timeout)
    except (TimeoutError, OSError):
        return PortState.CLOSED


async def probe(
    address: str,
    port: int,
    protocol: Protocol,
    *,
    name: str = "",
    settings: MonitorSettings | None = None,
) -> ProbeResult:
    """Run the latency and port checks concurrently. Never raises."""
    settings = settings or MonitorSettings()
    if protocol == Protocol.TCP:
        port_check = check_tcp_port(address, port, timeout=settings.tcp_timeout)
    else:
        port_check = check_udp_port(address, port, timeout=settings.udp_timeout)

    latency, port_state = await asyncio.gather(
        measure_latency(address, timeout=settings.ping_timeout),
        port_check,
        return_exceptions=True,
    )
    if isinstance(latency, Exception):
        logger.warning("Latency check for %s crashed: %s", name or address, latency)
        latency = None
    if isinstance(port_state, Exception):
        logger.warning("Port check for %s crashed: %s", name or address, port_state)
        port_state = PortState.CLOSED
    return ProbeResult(name=name, latency_ms=latency, port_state=port_state)


async def probe_endpoint(entry: EndpointEntry, settings: MonitorSettings) -> ProbeResult:
    """Probe a configured endpoint."""
    return await probe(
        entry.address,
        entry.port,
        entry.protocol,
        name=entry.name,
        settings=settings,
    )


async def probe_all(
    endpoints: Sequence[EndpointEntry],
    settings: MonitorSettings,
    prober: Prober | None = None,
) -> list[ProbeResult]:
    """Probe all endpoints concurrently, preserving input order.

    A prober that raises yields an unreachable result for that endpoint.
    """
    run = prober or probe_endpoint
    results = await asyncio.gather(
        *(run(entry, settings) for entry in endpoints),
        return_exceptions=True,
    )
    out: list[ProbeResult] = []
    for entry, result in zip(endpoints, results):
        if isinstance(result, Exception):
            logger.warning("Probe for %s failed: %s", entry.name, result)
            out.append(ProbeResult.unreachable(entry.name))
        else:
            out.append(result)
    return out
