"""Shared fixtures for portwatch tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from portwatch.config.models import PortwatchConfig


SAMPLE_CONFIG: Dict[str, Any] = {
    "notifier": {
        "bot_token": "test-bot-token-123",
        "channel_id": "998877",
        "api_base": "https://discord.example/api/v10",
    },
    "storage": {"db_path": ""},
    "monitor": {"interval": 30, "tcp_timeout": 3.0, "udp_timeout": 3.0, "ping_timeout": 2.0},
    "endpoints": [
        {"name": "Web", "address": "10.0.0.1", "port": 443, "protocol": "tcp"},
        {"name": "Game", "address": "10.0.0.2", "port": 27015, "protocol": "udp"},
        {"name": "Db", "address": "10.0.0.3", "port": 5432, "protocol": "tcp"},
    ],
}


@pytest.fixture()
def sample_config() -> PortwatchConfig:
    """Return a parsed PortwatchConfig from sample data."""
    return PortwatchConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def sample_config_dict() -> Dict[str, Any]:
    return dict(SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .portwatch.yaml and return the path."""
    path = tmp_path / ".portwatch.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path
