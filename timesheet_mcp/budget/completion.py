"""Checklist completion percentage."""

from timesheet_mcp.models.task import ChecklistItem


def completion_percentage(checklist: list[ChecklistItem]) -> float | None:
    """
    Percentage of checklist hours that are checked off.

    Returns None when the checklist carries no hours at all, which is distinct
    from 0% progress. The value is not clamped.
    """
    total_hours = sum(item.hours for item in checklist)
    if total_hours == 0:
        return None
    completed_hours = sum(item.hours for item in checklist if item.checked)
    return 100 * completed_hours / total_hours
