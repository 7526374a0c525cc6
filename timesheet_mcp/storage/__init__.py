"""SQLite storage for Timesheet MCP."""

from timesheet_mcp.storage.db import MEMORY, Database, now_utc
from timesheet_mcp.storage.repos import HolidayRepo, ProjectRepo, TaskRepo, TimeEntryRepo

__all__ = [
    "MEMORY",
    "Database",
    "now_utc",
    "TaskRepo",
    "TimeEntryRepo",
    "ProjectRepo",
    "HolidayRepo",
]
