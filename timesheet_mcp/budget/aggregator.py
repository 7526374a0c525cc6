"""Combine stored task fields with billed hours."""

from collections.abc import Mapping
from typing import Any

from timesheet_mcp.budget.completion import completion_percentage
from timesheet_mcp.budget.notes import parse_notes
from timesheet_mcp.enums import BudgetStatus
from timesheet_mcp.models.task import TaskModel, task_id_for

NEAR_LIMIT_RATIO = 0.2


def budget_status(budgeted_hours: float, hours_remaining: float) -> BudgetStatus:
    if budgeted_hours <= 0:
        return BudgetStatus.NO_BUDGET
    if hours_remaining <= 0:
        return BudgetStatus.OVER_BUDGET
    if hours_remaining / budgeted_hours <= NEAR_LIMIT_RATIO:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.ON_TRACK


def compute_task(row: Mapping[str, Any], hours_billed: float) -> TaskModel:
    """
    Build a TaskModel from a stored task row and its billed-hours sum.

    Args:
        row: Task row with project_name, description, budgeted_hours, notes,
            is_closed, created_at, updated_at (id optional)
        hours_billed: SUM(hours) of matching time entries

    Returns:
        TaskModel with remaining hours, completion and budget status filled in
    """
    budgeted = row.get("budgeted_hours")
    budgeted_hours = float(budgeted) if budgeted is not None else 0.0
    notes = row.get("notes") or ""
    hours_remaining = budgeted_hours - hours_billed
    checklist = parse_notes(notes).checklist

    return TaskModel(
        id=row.get("id") or task_id_for(row["project_name"], row["description"]),
        project_name=row["project_name"],
        description=row["description"],
        budgeted_hours=budgeted_hours,
        notes=notes,
        is_closed=bool(row.get("is_closed")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        hours_billed=hours_billed,
        hours_remaining=hours_remaining,
        completion_percentage=completion_percentage(checklist),
        budget_status=budget_status(budgeted_hours, hours_remaining),
        checklist=checklist,
    )
