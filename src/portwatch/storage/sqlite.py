"""SQLite-backed status recorder."""

from __future__ import annotations

import sqlite3

import aiosqlite

from portwatch.errors import StorageError
from portwatch.storage.recorder import StatusRecord

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS server_status (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT,
    ip TEXT,
    port INTEGER,
    protocol TEXT,
    status TEXT,
    ping INTEGER,
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""

_INSERT = (
    "INSERT INTO server_status (name, ip, port, protocol, status, ping, timestamp)"
    " VALUES (?, ?, ?, ?, ?, ?, ?)"
)


class SqliteRecorder:
    """Appends one server_status row per record. Never reads or updates rows."""

    def __init__(self, db_path: str = "server_status.db") -> None:
        self._db_path = db_path
        self._initialized = False

    @property
    def db_path(self) -> str:
        return self._db_path

    async def _init_connection(self, db: aiosqlite.Connection) -> None:
        """Create the table on first use."""
        if not self._initialized:
            await db.executescript(_CREATE_TABLE)
            self._initialized = True

    async def record(self, status_record: StatusRecord) -> None:
        """Insert a status record. Raises StorageError if the write fails."""
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await self._init_connection(db)
                await db.execute(
                    _INSERT,
                    (
                        status_record.name,
                        status_record.address,
                        status_record.port,
                        status_record.protocol,
                        status_record.status,
                        status_record.latency_ms,
                        status_record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                    ),
                )
                await db.commit()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Failed to write status for {status_record.name}: {exc}") from exc
