"""MCP tool definitions for Timesheet MCP."""

# Import all tools to register them with the MCP server
from timesheet_mcp.tools.entries import (
    timesheet_entries,
    timesheet_entry_add,
    timesheet_entry_delete,
    timesheet_entry_update,
    timesheet_holiday_add,
    timesheet_holiday_remove,
    timesheet_holidays,
    timesheet_project_add,
    timesheet_project_delete,
    timesheet_project_update,
    timesheet_projects,
)
from timesheet_mcp.tools.reports import (
    timesheet_invoice,
    timesheet_monthly_report,
    timesheet_monthly_statement,
    timesheet_weekly_summary,
)
from timesheet_mcp.tools.tasks import (
    timesheet_checklist_add,
    timesheet_checklist_autosplit,
    timesheet_checklist_edit,
    timesheet_checklist_remove,
    timesheet_checklist_toggle,
    timesheet_task_close,
    timesheet_task_delete,
    timesheet_task_draft_notes,
    timesheet_task_get,
    timesheet_task_rename,
    timesheet_task_update,
    timesheet_tasks,
)

__all__ = [
    # Task tools
    "timesheet_tasks",
    "timesheet_task_get",
    "timesheet_task_update",
    "timesheet_task_rename",
    "timesheet_task_close",
    "timesheet_task_delete",
    "timesheet_task_draft_notes",
    # Checklist tools
    "timesheet_checklist_add",
    "timesheet_checklist_toggle",
    "timesheet_checklist_edit",
    "timesheet_checklist_remove",
    "timesheet_checklist_autosplit",
    # Entry tools
    "timesheet_entries",
    "timesheet_entry_add",
    "timesheet_entry_update",
    "timesheet_entry_delete",
    # Project tools
    "timesheet_projects",
    "timesheet_project_add",
    "timesheet_project_update",
    "timesheet_project_delete",
    # Holiday tools
    "timesheet_holidays",
    "timesheet_holiday_add",
    "timesheet_holiday_remove",
    # Report tools
    "timesheet_weekly_summary",
    "timesheet_monthly_report",
    "timesheet_monthly_statement",
    "timesheet_invoice",
]
