"""Status record storage."""

from portwatch.storage.recorder import InMemoryRecorder, StatusRecord, StatusRecorder, record_all
from portwatch.storage.sqlite import SqliteRecorder

__all__ = [
    "InMemoryRecorder",
    "SqliteRecorder",
    "StatusRecord",
    "StatusRecorder",
    "record_all",
]
