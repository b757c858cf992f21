"""Portwatch CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from portwatch.config.models import PortwatchConfig

app = typer.Typer(
    name="portwatch",
    help="Portwatch: endpoint reachability monitor",
    no_args_is_help=True,
)
console = Console()

_STATUS_STYLES = {"good": "green", "degraded": "yellow", "down": "red"}


def _load(path: Path | None) -> PortwatchConfig:
    """Load config or exit with status 1."""
    from portwatch.config.loader import load_config
    from portwatch.errors import ConfigError

    try:
        return load_config(path=path)
    except (FileNotFoundError, ConfigError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.command()
def run(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to .portwatch.yaml"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Start the monitoring loop. Runs until interrupted."""
    from portwatch.monitor.runner import create_monitor

    _configure_logging(log_level)
    config = _load(config_path)
    if not config.endpoints:
        console.print("[red]No endpoints configured.[/red]")
        raise typer.Exit(1)

    monitor = create_monitor(config)
    try:
        asyncio.run(monitor.run_forever())
    except KeyboardInterrupt:
        console.print("\n[bold]Portwatch stopped.[/bold]")


@app.command()
def check(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to .portwatch.yaml"),
) -> None:
    """Probe every endpoint once and print the result. Nothing is recorded or published."""
    from portwatch.monitor.runner import create_monitor
    from portwatch.reporting.payload import format_latency
    from portwatch.status.classifier import overall_status

    config = _load(config_path)
    monitor = create_monitor(config)
    statuses = asyncio.run(monitor.check())

    table = Table(title="Portwatch Endpoint Status")
    table.add_column("Endpoint", style="bold")
    table.add_column("Address")
    table.add_column("Port")
    table.add_column("Status")
    table.add_column("Latency")

    for s in statuses:
        style = _STATUS_STYLES[s.status.value]
        table.add_row(
            s.name,
            s.endpoint.address,
            f"{s.endpoint.port}/{s.endpoint.protocol.value} ({s.result.port_state.value})",
            f"[{style}]{s.status.label}[/{style}]",
            format_latency(s.latency_ms),
        )

    console.print(table)
    console.print(f"Overall: {overall_status(s.status for s in statuses).summary_label}")


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .portwatch.yaml"),
) -> None:
    """Validate configuration file."""
    config = _load(path)
    console.print("[green]✓[/green] YAML parses correctly")
    console.print("[green]✓[/green] Pydantic validation passes")

    warnings: list[str] = []
    if not config.endpoints:
        warnings.append("No endpoints configured")
    counts = Counter(e.name for e in config.endpoints)
    for name, count in counts.items():
        if count > 1:
            warnings.append(f"Endpoint name '{name}' is used {count} times")
    if config.notifier.bot_token.startswith("${"):
        warnings.append(f"Bot token is unresolved: {config.notifier.bot_token}")
    if config.monitor.tcp_timeout >= config.monitor.interval:
        warnings.append("TCP timeout is not shorter than the cycle interval")

    console.print(f"[green]✓[/green] {len(config.endpoints)} endpoint(s) configured")
    for w in warnings:
        console.print(f"[yellow]! {w}[/yellow]")
    console.print("\n[green bold]Configuration is valid.[/green bold]")


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .portwatch.yaml"),
) -> None:
    """Print resolved configuration. The bot token is masked."""
    config = _load(path)

    token = config.notifier.bot_token
    masked = f"{token[:4]}…" if len(token) > 8 else "****"
    console.print("[bold]Notifier:[/bold]")
    console.print(f"  API: {config.notifier.api_base}")
    console.print(f"  Channel: {config.notifier.channel_id}")
    console.print(f"  Token: {masked}\n")

    console.print("[bold]Storage:[/bold]")
    console.print(f"  Database: {config.storage.db_path or '(in-memory)'}\n")

    console.print("[bold]Monitor:[/bold]")
    console.print(f"  Interval: {config.monitor.interval:g}s")
    console.print(
        f"  Timeouts: tcp {config.monitor.tcp_timeout:g}s, udp {config.monitor.udp_timeout:g}s,"
        f" ping {config.monitor.ping_timeout:g}s\n"
    )

    console.print("[bold]Endpoints:[/bold]")
    for entry in config.endpoints:
        console.print(f"  {entry.name}: {entry.address}:{entry.port}/{entry.protocol.value}")


def main() -> None:
    app()
