"""SQLite-backed registry that hands out unique service IDs."""

from __future__ import annotations

import os
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

_FIRST_SERVICE_ID = 101

_SCHEMA = """
CREATE TABLE IF NOT EXISTS services (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(64) NOT NULL UNIQUE,
    service_id INTEGER NOT NULL UNIQUE,
    created_at DATETIME
)
"""
_COLUMNS = "id, name, service_id, created_at"


class ServiceNotFoundError(LookupError):
    """Raised when no service with the requested name is registered."""


@dataclass(frozen=True)
class Service:
    """A registered service and the ID allocated to it."""

    id: int
    name: str
    service_id: int
    created_at: Optional[datetime] = None


def _to_service(row: tuple) -> Service:
    row_id, name, service_id, created = row
    return Service(
        id=row_id,
        name=name,
        service_id=service_id,
        created_at=datetime.fromisoformat(created) if created else None,
    )


class SQLiteStore:
    """Service registry stored in a SQLite database file."""

    def __init__(self, path: Union[str, "os.PathLike[str]"]):
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(os.fspath(path), check_same_thread=False)
        try:
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error:
            self._conn.close()
            raise

    def allocate(self, name: str) -> Service:
        """Return the service called ``name``, registering it with the next free ID if new."""
        with self._lock, self._conn:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM services WHERE name = ? ORDER BY id LIMIT 1",
                (name,),
            ).fetchone()
            if row is not None:
                return _to_service(row)

            (max_id,) = self._conn.execute(
                "SELECT COALESCE(MAX(service_id), 100) FROM services"
            ).fetchone()
            next_id = max(max_id + 1, _FIRST_SERVICE_ID)
            created = datetime.now(timezone.utc)
            cursor = self._conn.execute(
                "INSERT INTO services (name, service_id, created_at) VALUES (?, ?, ?)",
                (name, next_id, created.isoformat()),
            )
            return Service(cursor.lastrowid, name, next_id, created)

    def get(self, name: str) -> Service:
        """Return the service called ``name``; raise ServiceNotFoundError if absent."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM services WHERE name = ? ORDER BY id LIMIT 1",
                (name,),
            ).fetchone()
        if row is None:
            raise ServiceNotFoundError(name)
        return _to_service(row)

    def list(self) -> List[Service]:
        """Return all registered services in registration order."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM services ORDER BY id"
            ).fetchall()
        return [_to_service(row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "SQLiteStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()