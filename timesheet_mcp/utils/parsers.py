"""Parser helpers turning storage rows into models."""

from typing import Any

from timesheet_mcp.models.records import ProjectModel, TimeEntryModel


def _parse_entry(row: dict[str, Any]) -> TimeEntryModel:
    """
    Parse a timesheet_entries row into a TimeEntryModel.

    Args:
        row: Dictionary row from the entry repository

    Returns:
        TimeEntryModel instance with validated data
    """
    return TimeEntryModel.model_validate(row)


def _parse_entries(rows: list[dict[str, Any]]) -> list[TimeEntryModel]:
    return [TimeEntryModel.model_validate(r) for r in rows]


def _parse_project(row: dict[str, Any]) -> ProjectModel:
    """Parse a projects row; the stored 0/1 is_active becomes a bool."""
    return ProjectModel.model_validate({**row, "is_active": bool(row.get("is_active", 1))})


def _parse_projects(rows: list[dict[str, Any]]) -> list[ProjectModel]:
    return [_parse_project(r) for r in rows]
