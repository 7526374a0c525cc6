"""Task budget engine: notes codec, completion, auto-split, aggregation, rename."""

from timesheet_mcp.budget.aggregator import budget_status, compute_task
from timesheet_mcp.budget.autosave import AutoSaver
from timesheet_mcp.budget.completion import completion_percentage
from timesheet_mcp.budget.distributor import autosplit_checklist, distribute_hours
from timesheet_mcp.budget.notes import format_checklist_line, parse_notes, render_document, serialize_notes
from timesheet_mcp.budget.service import EntryStore, TaskBudgetService, TaskStore

__all__ = [
    "parse_notes",
    "serialize_notes",
    "render_document",
    "format_checklist_line",
    "completion_percentage",
    "distribute_hours",
    "autosplit_checklist",
    "budget_status",
    "compute_task",
    "TaskStore",
    "EntryStore",
    "TaskBudgetService",
    "AutoSaver",
]
