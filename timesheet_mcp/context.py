"""Application context shared by the MCP tools."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from timesheet_mcp.budget.autosave import AutoSaver
from timesheet_mcp.budget.service import TaskBudgetService
from timesheet_mcp.config import Settings, get_settings
from timesheet_mcp.storage.db import Database
from timesheet_mcp.storage.repos import HolidayRepo, ProjectRepo, TaskRepo, TimeEntryRepo

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Central container for the database, repositories, and services."""

    settings: Settings
    db: Database
    tasks: TaskRepo
    entries: TimeEntryRepo
    projects: ProjectRepo
    holidays: HolidayRepo
    service: TaskBudgetService
    autosaver: AutoSaver

    @classmethod
    def create(cls, settings: Settings) -> AppContext:
        """Open the database, make sure the schema exists, and wire services."""
        db = Database(settings.db_path)
        db.init_schema()
        tasks = TaskRepo(db)
        entries = TimeEntryRepo(db)
        service = TaskBudgetService(tasks, entries)

        def save_draft(_key: Any, payload: tuple[str, str, str]) -> None:
            project, description, notes = payload
            service.update_task(project, description, notes=notes)

        ctx = cls(
            settings=settings,
            db=db,
            tasks=tasks,
            entries=entries,
            projects=ProjectRepo(db),
            holidays=HolidayRepo(db),
            service=service,
            autosaver=AutoSaver(save_draft, delay=settings.autosave_delay),
        )
        logger.info("AppContext initialized with DB=%s", db.path)
        return ctx

    def close(self) -> None:
        self.db.close()


_context: AppContext | None = None


def get_context() -> AppContext:
    """Return the process-wide context, creating it from settings on first use."""
    global _context
    if _context is None:
        _context = AppContext.create(get_settings())
    return _context


def set_context(ctx: AppContext | None) -> None:
    global _context
    _context = ctx
