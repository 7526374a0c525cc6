"""Input models for Timesheet MCP tools."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from timesheet_mcp.enums import ResponseFormat, TaskState
from timesheet_mcp.models.reports import LineAdjustment

_FORMAT_DESCRIPTION = "Output format: 'markdown' for human-readable, 'concise' for compact, or 'json'"
# "|" is reserved as the separator in task ids
_PROJECT_PATTERN = r"^[^|]+$"


def _check_iso_date(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        return date.fromisoformat(v).isoformat()
    except ValueError as e:
        raise ValueError(f"Invalid date '{v}': expected YYYY-MM-DD") from e


# ============================================================================
# Task Input Models
# ============================================================================


class TaskKeyInput(BaseModel):
    """Identifies a task by project and description."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str = Field(
        ..., description="Project name the task belongs to", min_length=1, max_length=200, pattern=_PROJECT_PATTERN
    )
    description: str = Field(..., description="Task description (the time entries' description)", min_length=1)


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str | None = Field(default=None, description="Only tasks of this project")
    state: TaskState = Field(default=TaskState.ALL, description="Filter by state: all, open, or closed")
    search: str | None = Field(default=None, description="Case-insensitive text to find in task descriptions")
    budget_left: bool = Field(default=False, description="Only tasks with budgeted hours still remaining")
    has_budget: bool = Field(default=False, description="Only tasks with a budget set")
    no_budget: bool = Field(default=False, description="Only tasks without a budget")
    limit: int | None = Field(default=100, description="Maximum number of tasks to return", ge=1, le=1000)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)


class GetTaskInput(TaskKeyInput):
    """Input model for getting (or lazily creating) a task."""

    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)


class UpdateTaskInput(TaskKeyInput):
    """Input model for setting a task's budget and/or notes."""

    budgeted_hours: float | None = Field(
        default=None, description="Budgeted hours for the task", ge=0, allow_inf_nan=False
    )
    notes: str | None = Field(
        default=None,
        description="Full notes text; checklist lines look like '- [ ] Build API (3.5h)'",
    )


class RenameTaskInput(BaseModel):
    """Input model for renaming a task and its time entries."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project: str = Field(..., description="Project name the task belongs to", min_length=1, pattern=_PROJECT_PATTERN)
    old_description: str = Field(..., description="Current task description", min_length=1)
    new_description: str = Field(..., description="New task description", min_length=1)
    budgeted_hours: float | None = Field(default=None, description="Optional new budget", ge=0, allow_inf_nan=False)
    notes: str | None = Field(default=None, description="Optional new notes text")


class CloseTaskInput(TaskKeyInput):
    """Input model for closing or reopening a task."""

    closed: bool = Field(default=True, description="True to close the task, False to reopen it")


class DeleteTaskInput(TaskKeyInput):
    """Input model for deleting a task."""


class DraftNotesInput(TaskKeyInput):
    """Input model for a debounced notes draft."""

    notes: str = Field(..., description="Full notes text to save once editing pauses")


# ============================================================================
# Checklist Input Models
# ============================================================================


class ChecklistAddInput(TaskKeyInput):
    """Input model for appending a checklist item."""

    text: str = Field(..., description="Checklist item text", min_length=1, max_length=500)
    hours: float = Field(default=0.0, description="Hours allotted to the item", ge=0, allow_inf_nan=False)


class ChecklistToggleInput(TaskKeyInput):
    """Input model for checking or unchecking a checklist item."""

    item: int = Field(..., description="Checklist item number (1-based)", ge=1)
    checked: bool | None = Field(default=None, description="Set explicitly; omit to flip the current state")


class ChecklistEditInput(TaskKeyInput):
    """Input model for editing a checklist item's text or hours."""

    item: int = Field(..., description="Checklist item number (1-based)", ge=1)
    text: str | None = Field(default=None, description="New item text", min_length=1, max_length=500)
    hours: float | None = Field(default=None, description="New hours for the item", ge=0, allow_inf_nan=False)


class ChecklistRemoveInput(TaskKeyInput):
    """Input model for removing a checklist item."""

    item: int = Field(..., description="Checklist item number (1-based)", ge=1)


class AutosplitInput(TaskKeyInput):
    """Input model for spreading a task's budget over its checklist."""

    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)


# ============================================================================
# Time Entry Input Models
# ============================================================================


class ListEntriesInput(BaseModel):
    """Input model for listing time entries in a date range."""

    model_config = ConfigDict(str_strip_whitespace=True)

    start_date: str = Field(..., description="First day, YYYY-MM-DD (inclusive)")
    end_date: str = Field(..., description="Last day, YYYY-MM-DD (inclusive)")
    project: str | None = Field(default=None, description="Only entries of this project")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)

    check_dates = field_validator("start_date", "end_date")(_check_iso_date)


class AddEntryInput(BaseModel):
    """Input model for logging hours."""

    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(..., description="Day worked, YYYY-MM-DD")
    project: str = Field(..., description="Project name", min_length=1, pattern=_PROJECT_PATTERN)
    description: str = Field(..., description="Task description the hours count against", min_length=1)
    hours: float = Field(..., description="Hours worked", ge=0, le=24, allow_inf_nan=False)

    check_date = field_validator("date")(_check_iso_date)


class UpdateEntryInput(BaseModel):
    """Input model for changing a time entry."""

    model_config = ConfigDict(str_strip_whitespace=True)

    entry_id: str = Field(..., description="Time entry ID", min_length=1)
    date: str | None = Field(default=None, description="New day, YYYY-MM-DD")
    project: str | None = Field(default=None, description="New project name", min_length=1, pattern=_PROJECT_PATTERN)
    description: str | None = Field(default=None, description="New task description", min_length=1)
    hours: float | None = Field(default=None, description="New hours", ge=0, le=24, allow_inf_nan=False)

    check_date = field_validator("date")(_check_iso_date)


class DeleteEntryInput(BaseModel):
    """Input model for deleting a time entry."""

    model_config = ConfigDict(str_strip_whitespace=True)

    entry_id: str = Field(..., description="Time entry ID", min_length=1)


# ============================================================================
# Project and Holiday Input Models
# ============================================================================


class ListProjectsInput(BaseModel):
    """Input model for listing projects."""

    model_config = ConfigDict(str_strip_whitespace=True)

    active_only: bool = Field(default=False, description="Hide deactivated projects")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)


class AddProjectInput(BaseModel):
    """Input model for creating a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Unique project name", min_length=1, max_length=200, pattern=_PROJECT_PATTERN)
    description: str = Field(default="", description="Optional project description")
    color: str = Field(default="#3b82f6", description="Display color as #rrggbb", pattern=r"^#[0-9a-fA-F]{6}$")


class UpdateProjectInput(BaseModel):
    """Input model for updating a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)
    name: str | None = Field(
        default=None, description="New project name", min_length=1, max_length=200, pattern=_PROJECT_PATTERN
    )
    description: str | None = Field(default=None, description="New description")
    color: str | None = Field(default=None, description="New color as #rrggbb", pattern=r"^#[0-9a-fA-F]{6}$")
    is_active: bool | None = Field(default=None, description="False to deactivate, True to reactivate")


class DeleteProjectInput(BaseModel):
    """Input model for deleting a project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: str = Field(..., description="Project ID", min_length=1)


class ListHolidaysInput(BaseModel):
    """Input model for listing holidays."""

    model_config = ConfigDict(str_strip_whitespace=True)

    start_date: str = Field(..., description="First day, YYYY-MM-DD (inclusive)")
    end_date: str = Field(..., description="Last day, YYYY-MM-DD (inclusive)")

    check_dates = field_validator("start_date", "end_date")(_check_iso_date)


class HolidayInput(BaseModel):
    """Input model for marking or unmarking a holiday."""

    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(..., description="Holiday, YYYY-MM-DD")

    check_date = field_validator("date")(_check_iso_date)


# ============================================================================
# Report Input Models
# ============================================================================


class WeeklySummaryInput(BaseModel):
    """Input model for a Monday-Sunday weekly summary."""

    model_config = ConfigDict(str_strip_whitespace=True)

    date: str | None = Field(default=None, description="Any day in the week, YYYY-MM-DD (default: today)")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)

    check_date = field_validator("date")(_check_iso_date)


class MonthlyReportInput(BaseModel):
    """Input model for a monthly report."""

    model_config = ConfigDict(str_strip_whitespace=True)

    year: int = Field(..., description="Year, e.g. 2025", ge=1900, le=9999)
    month: int = Field(..., description="Month number 1-12", ge=1, le=12)
    hourly_rate: float | None = Field(
        default=None, description="Rate for estimated earnings (default: configured rate)", gt=0, allow_inf_nan=False
    )
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)


class MonthlyStatementInput(MonthlyReportInput):
    """Input model for a monthly statement."""


class InvoiceInput(BaseModel):
    """Input model for building an invoice from a month of entries."""

    model_config = ConfigDict(str_strip_whitespace=True)

    year: int = Field(..., description="Year of the billed month", ge=1900, le=9999)
    month: int = Field(..., description="Billed month 1-12", ge=1, le=12)
    invoice_number: str = Field(..., description="Invoice number like 'INV-0042'", pattern=r"^INV-\d+$")
    customer_name: str = Field(..., description="Customer to bill", min_length=1)
    hourly_rate: float | None = Field(
        default=None, description="Rate per hour (default: configured rate)", gt=0, allow_inf_nan=False
    )
    adjustments: list[LineAdjustment] = Field(
        default_factory=list, description="Extra lines; negative amounts are discounts", max_length=50
    )
    due_days: int | None = Field(default=None, description="Days until due (default: configured)", ge=0)
    currency: str | None = Field(default=None, description="Currency code (default: configured)")
    issue_date: str | None = Field(default=None, description="Issue date, YYYY-MM-DD (default: today)")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN, description=_FORMAT_DESCRIPTION)

    check_date = field_validator("issue_date")(_check_iso_date)
