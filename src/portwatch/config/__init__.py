"""Portwatch configuration system."""

from portwatch.config.loader import find_config_file, load_config
from portwatch.config.models import (
    EndpointEntry,
    MonitorSettings,
    NotifierConfig,
    PortwatchConfig,
    Protocol,
    StorageConfig,
)

__all__ = [
    "EndpointEntry",
    "MonitorSettings",
    "NotifierConfig",
    "PortwatchConfig",
    "Protocol",
    "StorageConfig",
    "load_config",
    "find_config_file",
]
