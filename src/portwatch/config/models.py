"""Pydantic models for portwatch configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Protocol(str, Enum):
    """Transport protocol of a monitored endpoint."""

    TCP = "tcp"
    UDP = "udp"


class EndpointEntry(BaseModel):
    """A monitored network service."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    protocol: Protocol = Protocol.TCP


class NotifierConfig(BaseModel):
    """Discord channel the status report is published to."""

    bot_token: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    api_base: str = "https://discord.com/api/v10"
    timeout: float = 10.0


class StorageConfig(BaseModel):
    """Status record storage."""

    db_path: str = "server_status.db"  # empty = in-memory only


class MonitorSettings(BaseModel):
    """Cycle period and probe timeouts, in seconds."""

    interval: float = Field(default=30.0, gt=0)
    tcp_timeout: float = Field(default=3.0, gt=0)
    udp_timeout: float = Field(default=3.0, gt=0)
    ping_timeout: float = Field(default=2.0, gt=0)


class PortwatchConfig(BaseModel):
    """Root configuration model for .portwatch.yaml."""

    notifier: NotifierConfig
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    endpoints: list[EndpointEntry] = Field(default_factory=list)
