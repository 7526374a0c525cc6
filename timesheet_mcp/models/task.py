"""Core task models for Timesheet MCP."""

from __future__ import annotations

from pydantic import BaseModel, Field

from timesheet_mcp.enums import BudgetStatus

TASK_ID_SEPARATOR = "|"


class ChecklistItem(BaseModel):
    """One checklist line inside a task's notes."""

    text: str = Field(..., min_length=1)
    checked: bool = False
    hours: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    position: int = 0


class NotesDocument(BaseModel):
    """A task's notes split into checklist items and free-text lines.

    The checklist always serializes before the free text, so the relative
    order of the two kinds of lines is not preserved across a round trip.
    """

    checklist: list[ChecklistItem] = Field(default_factory=list)
    free_text: list[str] = Field(default_factory=list)


class TaskModel(BaseModel):
    """A budgeted unit of work identified by project and description."""

    id: str
    project_name: str
    description: str
    budgeted_hours: float = 0.0
    notes: str = ""
    is_closed: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    # Derived from time entries and notes (never stored)
    hours_billed: float = 0.0
    hours_remaining: float = 0.0
    completion_percentage: float | None = None
    budget_status: BudgetStatus = BudgetStatus.NO_BUDGET
    checklist: list[ChecklistItem] = Field(default_factory=list)


def task_id_for(project_name: str, description: str) -> str:
    """Build the single-string identity of a task.

    Project names never contain the separator, so the id splits back at its
    first "|" even when the description contains one.
    """
    return f"{project_name}{TASK_ID_SEPARATOR}{description}"
