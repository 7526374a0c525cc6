"""Pydantic models for Timesheet MCP."""

from timesheet_mcp.models.inputs import (
    AddEntryInput,
    AddProjectInput,
    AutosplitInput,
    ChecklistAddInput,
    ChecklistEditInput,
    ChecklistRemoveInput,
    ChecklistToggleInput,
    CloseTaskInput,
    DeleteEntryInput,
    DeleteProjectInput,
    DeleteTaskInput,
    DraftNotesInput,
    GetTaskInput,
    HolidayInput,
    InvoiceInput,
    ListEntriesInput,
    ListHolidaysInput,
    ListProjectsInput,
    ListTasksInput,
    MonthlyReportInput,
    MonthlyStatementInput,
    RenameTaskInput,
    TaskKeyInput,
    UpdateEntryInput,
    UpdateProjectInput,
    UpdateTaskInput,
    WeeklySummaryInput,
)
from timesheet_mcp.models.records import ProjectModel, TimeEntryModel
from timesheet_mcp.models.reports import (
    Invoice,
    InvoiceLineItem,
    LineAdjustment,
    MonthlyStatement,
    PeriodSummary,
    ProjectTotals,
)
from timesheet_mcp.models.task import ChecklistItem, NotesDocument, TaskModel, task_id_for

__all__ = [
    # Task models
    "ChecklistItem",
    "NotesDocument",
    "TaskModel",
    "task_id_for",
    # Records
    "TimeEntryModel",
    "ProjectModel",
    # Report models
    "PeriodSummary",
    "ProjectTotals",
    "MonthlyStatement",
    "LineAdjustment",
    "InvoiceLineItem",
    "Invoice",
    # Task input models
    "TaskKeyInput",
    "ListTasksInput",
    "GetTaskInput",
    "UpdateTaskInput",
    "RenameTaskInput",
    "CloseTaskInput",
    "DeleteTaskInput",
    "DraftNotesInput",
    # Checklist input models
    "ChecklistAddInput",
    "ChecklistToggleInput",
    "ChecklistEditInput",
    "ChecklistRemoveInput",
    "AutosplitInput",
    # Entry, project, holiday input models
    "ListEntriesInput",
    "AddEntryInput",
    "UpdateEntryInput",
    "DeleteEntryInput",
    "ListProjectsInput",
    "AddProjectInput",
    "UpdateProjectInput",
    "DeleteProjectInput",
    "ListHolidaysInput",
    "HolidayInput",
    # Report input models
    "WeeklySummaryInput",
    "MonthlyReportInput",
    "MonthlyStatementInput",
    "InvoiceInput",
]
