"""Error taxonomy for portwatch."""

from __future__ import annotations


class PortwatchError(Exception):
    """Base class for all portwatch errors."""


class ProbeError(PortwatchError):
    """A latency or port check could not complete. Folded into a Down status."""


class StorageError(PortwatchError):
    """A status record could not be written."""


class PublishError(PortwatchError):
    """The status report could not be created or updated."""


class ConfigError(PortwatchError, ValueError):
    """Configuration is unreadable or invalid. Fatal at startup."""
