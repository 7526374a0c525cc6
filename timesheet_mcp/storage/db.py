"""SQLite connection, schema, and transactions.

- WAL journal for file databases, foreign_keys=ON
- autocommit connection; multi-statement writes go through transaction()
- sqlite3 errors are re-raised as ConflictError / StorageError
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from timesheet_mcp.errors import ConflictError, StorageError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

SCHEMA = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT '',
    is_active INTEGER NOT NULL DEFAULT 1,
    color TEXT NOT NULL DEFAULT '#3b82f6',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS timesheet_entries (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    project TEXT NOT NULL,
    description TEXT NOT NULL,
    hours REAL NOT NULL CHECK (hours >= 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    project_name TEXT NOT NULL,
    description TEXT NOT NULL,
    budgeted_hours REAL NOT NULL DEFAULT 0 CHECK (budgeted_hours >= 0),
    notes TEXT NOT NULL DEFAULT '',
    is_closed INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE (project_name, description)
);

CREATE TABLE IF NOT EXISTS holidays (
    date TEXT PRIMARY KEY,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_entries_date ON timesheet_entries(date);
CREATE INDEX IF NOT EXISTS idx_entries_task ON timesheet_entries(project, description);
CREATE INDEX IF NOT EXISTS idx_projects_active ON projects(is_active);
"""


def now_utc() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    def __init__(self, path: Path | str = MEMORY) -> None:
        self.path = str(path)
        if self.path != MEMORY:
            file_path = Path(self.path).expanduser()
            file_path.parent.mkdir(parents=True, exist_ok=True)
            self.path = str(file_path)
        self.conn = sqlite3.connect(self.path, isolation_level=None, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        if self.path != MEMORY:
            self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA foreign_keys=ON;")

    def init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        logger.debug("Schema ready at %s", self.path)

    def close(self) -> None:
        self.conn.close()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Run one statement, translating sqlite3 failures."""
        try:
            return self.conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise ConflictError(f"Duplicate record: {e}") from e
            raise StorageError(f"Integrity check failed: {e}") from e
        except sqlite3.Error as e:
            raise StorageError(f"Database error: {e}") from e

    def fetchone(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        row = self.execute(sql, params).fetchone()
        return dict(row) if row else None

    def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        return [dict(r) for r in self.execute(sql, params).fetchall()]

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Group statements into one write transaction.

        BEGIN IMMEDIATE takes the write lock up front, so a check-then-write
        sequence inside the block cannot interleave with another writer.
        Nested use joins the outer transaction.
        """
        if self.conn.in_transaction:
            yield self.conn
            return
        try:
            self.conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise StorageError(f"Could not start transaction: {e}") from e
        try:
            yield self.conn
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
