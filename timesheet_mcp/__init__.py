"""
MCP Server for timesheets and task budgets.

This server records time entries against projects and tasks, tracks each
task's budgeted hours and checklist progress, and builds weekly and monthly
reports, statements, and invoices from a local SQLite database.
"""

# Re-export enums and errors
from timesheet_mcp.enums import BudgetStatus, ResponseFormat, TaskState
from timesheet_mcp.errors import ConflictError, NotFoundError, StorageError, TimesheetError, ValidationError

# Re-export models
from timesheet_mcp.models import (
    ChecklistItem,
    Invoice,
    MonthlyStatement,
    NotesDocument,
    PeriodSummary,
    ProjectModel,
    TaskModel,
    TimeEntryModel,
    task_id_for,
)

# Re-export the budget engine
from timesheet_mcp.budget import (
    AutoSaver,
    TaskBudgetService,
    autosplit_checklist,
    completion_percentage,
    compute_task,
    distribute_hours,
    parse_notes,
    serialize_notes,
)

# Re-export MCP server instance
from timesheet_mcp.server import mcp

# Re-export tools
from timesheet_mcp.tools import (
    timesheet_checklist_add,
    timesheet_checklist_autosplit,
    timesheet_checklist_edit,
    timesheet_checklist_remove,
    timesheet_checklist_toggle,
    timesheet_entries,
    timesheet_entry_add,
    timesheet_entry_delete,
    timesheet_entry_update,
    timesheet_holiday_add,
    timesheet_holiday_remove,
    timesheet_holidays,
    timesheet_invoice,
    timesheet_monthly_report,
    timesheet_monthly_statement,
    timesheet_project_add,
    timesheet_project_delete,
    timesheet_project_update,
    timesheet_projects,
    timesheet_task_close,
    timesheet_task_delete,
    timesheet_task_draft_notes,
    timesheet_task_get,
    timesheet_task_rename,
    timesheet_task_update,
    timesheet_tasks,
    timesheet_weekly_summary,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskState",
    "BudgetStatus",
    # Errors
    "TimesheetError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "StorageError",
    # Models
    "ChecklistItem",
    "NotesDocument",
    "TaskModel",
    "TimeEntryModel",
    "ProjectModel",
    "PeriodSummary",
    "MonthlyStatement",
    "Invoice",
    "task_id_for",
    # Budget engine
    "parse_notes",
    "serialize_notes",
    "completion_percentage",
    "distribute_hours",
    "autosplit_checklist",
    "compute_task",
    "TaskBudgetService",
    "AutoSaver",
    # Tools
    "timesheet_tasks",
    "timesheet_task_get",
    "timesheet_task_update",
    "timesheet_task_rename",
    "timesheet_task_close",
    "timesheet_task_delete",
    "timesheet_task_draft_notes",
    "timesheet_checklist_add",
    "timesheet_checklist_toggle",
    "timesheet_checklist_edit",
    "timesheet_checklist_remove",
    "timesheet_checklist_autosplit",
    "timesheet_entries",
    "timesheet_entry_add",
    "timesheet_entry_update",
    "timesheet_entry_delete",
    "timesheet_projects",
    "timesheet_project_add",
    "timesheet_project_update",
    "timesheet_project_delete",
    "timesheet_holidays",
    "timesheet_holiday_add",
    "timesheet_holiday_remove",
    "timesheet_weekly_summary",
    "timesheet_monthly_report",
    "timesheet_monthly_statement",
    "timesheet_invoice",
    # MCP server instance
    "mcp",
]
