"""SQLite repositories for tasks, time entries, projects, and holidays.

Repositories return plain dict rows; turning them into models is the job of
the budget engine and the tool layer.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from timesheet_mcp.errors import NotFoundError
from timesheet_mcp.models.task import task_id_for
from timesheet_mcp.storage.db import Database, now_utc

Row = dict[str, Any]


class TaskRepo:
    """Task rows keyed by (project_name, description)."""

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self.db.transaction():
            yield

    def get_task(self, project: str, description: str) -> Row | None:
        return self.db.fetchone(
            "SELECT * FROM tasks WHERE project_name = ? AND description = ?",
            (project, description),
        )

    def get_task_by_id(self, task_id: str) -> Row | None:
        return self.db.fetchone("SELECT * FROM tasks WHERE id = ?", (task_id,))

    def list_tasks(self, project: str | None = None) -> list[Row]:
        if project:
            return self.db.fetchall(
                "SELECT * FROM tasks WHERE project_name = ? ORDER BY project_name ASC, description ASC",
                (project,),
            )
        return self.db.fetchall("SELECT * FROM tasks ORDER BY project_name ASC, description ASC")

    def upsert_task(self, project: str, description: str, budgeted_hours: float, notes: str) -> Row:
        ts = now_utc()
        self.db.execute(
            """
            INSERT INTO tasks (id, project_name, description, budgeted_hours, notes, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(project_name, description) DO UPDATE SET
                budgeted_hours = excluded.budgeted_hours,
                notes = excluded.notes,
                updated_at = excluded.updated_at
            """,
            (task_id_for(project, description), project, description, budgeted_hours, notes, ts, ts),
        )
        return self.get_task(project, description)  # type: ignore[return-value]

    def set_closed(self, project: str, description: str, closed: bool) -> bool:
        cur = self.db.execute(
            "UPDATE tasks SET is_closed = ?, updated_at = ? WHERE project_name = ? AND description = ?",
            (1 if closed else 0, now_utc(), project, description),
        )
        return cur.rowcount > 0

    def delete_task_identity(self, project: str, description: str) -> bool:
        cur = self.db.execute(
            "DELETE FROM tasks WHERE project_name = ? AND description = ?",
            (project, description),
        )
        return cur.rowcount > 0

    def rename_task_identity(
        self,
        project: str,
        old_description: str,
        new_description: str,
        *,
        budgeted_hours: float | None = None,
        notes: str | None = None,
    ) -> Row:
        """
        Move a task row to a new description.

        The old row is removed and a new one inserted with the same budget,
        notes, closed flag and created_at, and a fresh updated_at. A task
        already living at the new identity makes the insert fail with
        ConflictError. Call inside transaction().
        """
        old = self.get_task(project, old_description)
        if old is None:
            raise NotFoundError(f"Task '{task_id_for(project, old_description)}' not found")

        self.delete_task_identity(project, old_description)
        self.db.execute(
            """
            INSERT INTO tasks (id, project_name, description, budgeted_hours, notes, is_closed,
                               created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task_id_for(project, new_description),
                project,
                new_description,
                old["budgeted_hours"] if budgeted_hours is None else budgeted_hours,
                old["notes"] if notes is None else notes,
                old["is_closed"],
                old["created_at"],
                now_utc(),
            ),
        )
        return self.get_task(project, new_description)  # type: ignore[return-value]


class TimeEntryRepo:
    """Time entries; the budget engine only reads sums and renames descriptions."""

    def __init__(self, db: Database):
        self.db = db

    def sum_hours(self, project: str, description: str) -> float:
        row = self.db.fetchone(
            "SELECT COALESCE(SUM(hours), 0) AS total FROM timesheet_entries WHERE project = ? AND description = ?",
            (project, description),
        )
        return float(row["total"]) if row else 0.0

    def sum_hours_by_task(self) -> dict[tuple[str, str], float]:
        rows = self.db.fetchall(
            "SELECT project, description, SUM(hours) AS total FROM timesheet_entries GROUP BY project, description"
        )
        return {(r["project"], r["description"]): float(r["total"]) for r in rows}

    def rename_entries_description(self, project: str, old_description: str, new_description: str) -> int:
        cur = self.db.execute(
            "UPDATE timesheet_entries SET description = ?, updated_at = ? WHERE project = ? AND description = ?",
            (new_description, now_utc(), project, old_description),
        )
        return cur.rowcount

    def add_entry(self, date: str, project: str, description: str, hours: float) -> Row:
        entry_id = str(uuid.uuid4())
        ts = now_utc()
        self.db.execute(
            """
            INSERT INTO timesheet_entries (id, date, project, description, hours, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (entry_id, date, project, description, hours, ts, ts),
        )
        return self.get_entry(entry_id)  # type: ignore[return-value]

    def get_entry(self, entry_id: str) -> Row | None:
        return self.db.fetchone("SELECT * FROM timesheet_entries WHERE id = ?", (entry_id,))

    def update_entry(
        self,
        entry_id: str,
        *,
        project: str | None = None,
        description: str | None = None,
        hours: float | None = None,
        date: str | None = None,
    ) -> Row | None:
        sets, params = [], []
        for column, value in (("project", project), ("description", description), ("hours", hours), ("date", date)):
            if value is not None:
                sets.append(f"{column} = ?")
                params.append(value)
        if sets:
            sets.append("updated_at = ?")
            params.append(now_utc())
            self.db.execute(f"UPDATE timesheet_entries SET {', '.join(sets)} WHERE id = ?", (*params, entry_id))
        return self.get_entry(entry_id)

    def delete_entry(self, entry_id: str) -> bool:
        cur = self.db.execute("DELETE FROM timesheet_entries WHERE id = ?", (entry_id,))
        return cur.rowcount > 0

    def list_entries(self, start_date: str, end_date: str) -> list[Row]:
        return self.db.fetchall(
            """
            SELECT * FROM timesheet_entries
            WHERE date >= ? AND date <= ?
            ORDER BY date ASC, created_at ASC
            """,
            (start_date, end_date),
        )

    def count_for_project(self, project: str) -> int:
        row = self.db.fetchone("SELECT COUNT(*) AS c FROM timesheet_entries WHERE project = ?", (project,))
        return int(row["c"]) if row else 0


class ProjectRepo:
    def __init__(self, db: Database):
        self.db = db

    def list_projects(self, active_only: bool = False) -> list[Row]:
        if active_only:
            return self.db.fetchall("SELECT * FROM projects WHERE is_active = 1 ORDER BY name ASC")
        return self.db.fetchall("SELECT * FROM projects ORDER BY name ASC")

    def get_project(self, project_id: str) -> Row | None:
        return self.db.fetchone("SELECT * FROM projects WHERE id = ?", (project_id,))

    def add_project(self, name: str, description: str = "", color: str = "#3b82f6") -> Row:
        project_id = str(uuid.uuid4())
        ts = now_utc()
        self.db.execute(
            """
            INSERT INTO projects (id, name, description, is_active, color, created_at, updated_at)
            VALUES (?, ?, ?, 1, ?, ?, ?)
            """,
            (project_id, name, description, color, ts, ts),
        )
        return self.get_project(project_id)  # type: ignore[return-value]

    def update_project(
        self,
        project_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
        is_active: bool | None = None,
    ) -> Row | None:
        sets, params = [], []
        if name is not None:
            sets.append("name = ?")
            params.append(name)
        if description is not None:
            sets.append("description = ?")
            params.append(description)
        if color is not None:
            sets.append("color = ?")
            params.append(color)
        if is_active is not None:
            sets.append("is_active = ?")
            params.append(1 if is_active else 0)
        if sets:
            sets.append("updated_at = ?")
            params.append(now_utc())
            self.db.execute(f"UPDATE projects SET {', '.join(sets)} WHERE id = ?", (*params, project_id))
        return self.get_project(project_id)

    def delete_project(self, project_id: str) -> bool:
        cur = self.db.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return cur.rowcount > 0


class HolidayRepo:
    def __init__(self, db: Database):
        self.db = db

    def list_holidays(self, start_date: str, end_date: str) -> list[str]:
        rows = self.db.fetchall(
            "SELECT date FROM holidays WHERE date >= ? AND date <= ? ORDER BY date ASC",
            (start_date, end_date),
        )
        return [r["date"] for r in rows]

    def add_holiday(self, date: str) -> bool:
        cur = self.db.execute(
            "INSERT INTO holidays (date, created_at) VALUES (?, ?) ON CONFLICT(date) DO NOTHING",
            (date, now_utc()),
        )
        return cur.rowcount > 0

    def remove_holiday(self, date: str) -> bool:
        cur = self.db.execute("DELETE FROM holidays WHERE date = ?", (date,))
        return cur.rowcount > 0
