"""MCP tool definitions for time entries, projects, and holidays."""

import json
import logging

from mcp.types import ToolAnnotations

from timesheet_mcp.context import get_context
from timesheet_mcp.enums import ResponseFormat
from timesheet_mcp.errors import ConflictError, NotFoundError, TimesheetError
from timesheet_mcp.models.inputs import (
    AddEntryInput,
    AddProjectInput,
    DeleteEntryInput,
    DeleteProjectInput,
    HolidayInput,
    ListEntriesInput,
    ListHolidaysInput,
    ListProjectsInput,
    UpdateEntryInput,
    UpdateProjectInput,
)
from timesheet_mcp.server import mcp
from timesheet_mcp.utils.formatters import (
    _format_entries_concise,
    _format_entries_markdown,
    _format_holidays,
    _format_projects_concise,
    _format_projects_markdown,
)
from timesheet_mcp.utils.parsers import _parse_entries, _parse_entry, _parse_project, _parse_projects

logger = logging.getLogger(__name__)


# ============================================================================
# Time entries
# ============================================================================


@mcp.tool(
    name="timesheet_entries",
    annotations=ToolAnnotations(
        title="List Time Entries",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_entries(params: ListEntriesInput) -> str:
    """
    List time entries between two dates (inclusive), oldest first.

    USE THIS WHEN:
    - Looking up entry IDs to update or delete
    - Checking what was logged on given days

    DO NOT USE WHEN:
    - You only need totals → use timesheet_weekly_summary or timesheet_monthly_report

    Args:
        params: ListEntriesInput containing start_date, end_date, project, response_format

    Returns:
        Entries as a markdown table, concise lines, or JSON

    Examples:
        - One week: params with start_date="2025-03-03", end_date="2025-03-09"
    """
    if params.start_date > params.end_date:
        return "Error: start_date must not be after end_date"
    try:
        rows = get_context().entries.list_entries(params.start_date, params.end_date)
    except TimesheetError as e:
        return f"Error: {e}"

    entries = _parse_entries(rows)
    if params.project:
        entries = [e for e in entries if e.project == params.project]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"count": len(entries), "entries": [e.model_dump() for e in entries]}, indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_entries_concise(entries)
    return _format_entries_markdown(entries, f"Time Entries {params.start_date} to {params.end_date}")


@mcp.tool(
    name="timesheet_entry_add",
    annotations=ToolAnnotations(
        title="Log Hours",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_entry_add(params: AddEntryInput) -> str:
    """
    Log hours for a project and task description on a day.

    The description is what ties the hours to a task: the task with the same
    project and description counts these hours as billed.

    Args:
        params: AddEntryInput containing date, project, description, and hours

    Returns:
        Confirmation with the new entry ID

    Examples:
        - params with date="2025-03-04", project="Acme", description="Build API", hours=2.5
    """
    try:
        row = get_context().entries.add_entry(params.date, params.project, params.description, params.hours)
    except TimesheetError as e:
        return f"Error: {e}"
    entry = _parse_entry(row)
    logger.info("Logged %sh on %s for %s|%s", entry.hours, entry.date, entry.project, entry.description)
    return f"Entry logged.\nID: {entry.id}"


@mcp.tool(
    name="timesheet_entry_update",
    annotations=ToolAnnotations(
        title="Update Time Entry",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_entry_update(params: UpdateEntryInput) -> str:
    """
    Change the date, project, description, or hours of a time entry.

    Args:
        params: UpdateEntryInput containing entry_id and the fields to change

    Returns:
        The updated entry, or an error if the ID is unknown
    """
    ctx = get_context()
    try:
        if ctx.entries.get_entry(params.entry_id) is None:
            raise NotFoundError(f"Entry '{params.entry_id}' not found")
        row = ctx.entries.update_entry(
            params.entry_id,
            project=params.project,
            description=params.description,
            hours=params.hours,
            date=params.date,
        )
    except TimesheetError as e:
        return f"Error: {e}"
    entry = _parse_entry(row)
    logger.info("Updated entry %s", entry.id)
    return _format_entries_markdown([entry], "Entry updated")


@mcp.tool(
    name="timesheet_entry_delete",
    annotations=ToolAnnotations(
        title="Delete Time Entry",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_entry_delete(params: DeleteEntryInput) -> str:
    """Delete a time entry by ID."""
    try:
        if not get_context().entries.delete_entry(params.entry_id):
            raise NotFoundError(f"Entry '{params.entry_id}' not found")
    except TimesheetError as e:
        return f"Error: {e}"
    logger.info("Deleted entry %s", params.entry_id)
    return f"Entry {params.entry_id} deleted."


# ============================================================================
# Projects
# ============================================================================


@mcp.tool(
    name="timesheet_projects",
    annotations=ToolAnnotations(
        title="List Projects",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_projects(params: ListProjectsInput) -> str:
    """
    List projects by name.

    Args:
        params: ListProjectsInput containing active_only and response_format

    Returns:
        Projects with their ID, color, and active state
    """
    try:
        projects = _parse_projects(get_context().projects.list_projects(params.active_only))
    except TimesheetError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"count": len(projects), "projects": [p.model_dump() for p in projects]}, indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_projects_concise(projects)
    return _format_projects_markdown(projects)


@mcp.tool(
    name="timesheet_project_add",
    annotations=ToolAnnotations(
        title="Add Project",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_project_add(params: AddProjectInput) -> str:
    """
    Create a project. Project names are unique.

    Args:
        params: AddProjectInput containing name, description, and color

    Returns:
        Confirmation with the project ID
    """
    try:
        project = _parse_project(get_context().projects.add_project(params.name, params.description, params.color))
    except ConflictError:
        return f"Error: A project named '{params.name}' already exists"
    except TimesheetError as e:
        return f"Error: {e}"
    logger.info("Created project %s (%s)", project.name, project.id)
    return f"Project '{project.name}' created.\nID: {project.id}"


@mcp.tool(
    name="timesheet_project_update",
    annotations=ToolAnnotations(
        title="Update Project",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_project_update(params: UpdateProjectInput) -> str:
    """
    Rename, recolor, describe, deactivate, or reactivate a project.

    Renaming a project does not touch existing time entries or tasks; they
    keep the old project name.

    Args:
        params: UpdateProjectInput containing project_id and the fields to change

    Returns:
        The updated project
    """
    ctx = get_context()
    try:
        if ctx.projects.get_project(params.project_id) is None:
            raise NotFoundError(f"Project '{params.project_id}' not found")
        row = ctx.projects.update_project(
            params.project_id,
            name=params.name,
            description=params.description,
            color=params.color,
            is_active=params.is_active,
        )
    except ConflictError:
        return f"Error: A project named '{params.name}' already exists"
    except TimesheetError as e:
        return f"Error: {e}"
    project = _parse_project(row)
    logger.info("Updated project %s", project.id)
    return _format_projects_markdown([project])


@mcp.tool(
    name="timesheet_project_delete",
    annotations=ToolAnnotations(
        title="Delete Project",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_project_delete(params: DeleteProjectInput) -> str:
    """
    Delete a project that has no time entries.

    Projects with logged hours cannot be deleted; deactivate them with
    timesheet_project_update(is_active=False) instead.

    Args:
        params: DeleteProjectInput containing project_id

    Returns:
        Confirmation or an error message
    """
    ctx = get_context()
    try:
        row = ctx.projects.get_project(params.project_id)
        if row is None:
            raise NotFoundError(f"Project '{params.project_id}' not found")
        with ctx.db.transaction():
            if ctx.entries.count_for_project(row["name"]) > 0:
                raise ConflictError("Cannot delete project that has time entries. Deactivate it instead.")
            ctx.projects.delete_project(params.project_id)
    except TimesheetError as e:
        return f"Error: {e}"
    logger.info("Deleted project %s (%s)", row["name"], params.project_id)
    return f"Project '{row['name']}' deleted."


# ============================================================================
# Holidays
# ============================================================================


@mcp.tool(
    name="timesheet_holidays",
    annotations=ToolAnnotations(
        title="List Holidays",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_holidays(params: ListHolidaysInput) -> str:
    """List holidays between two dates (inclusive)."""
    try:
        holidays = get_context().holidays.list_holidays(params.start_date, params.end_date)
    except TimesheetError as e:
        return f"Error: {e}"
    return _format_holidays(holidays, params.start_date, params.end_date)


@mcp.tool(
    name="timesheet_holiday_add",
    annotations=ToolAnnotations(
        title="Add Holiday",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_holiday_add(params: HolidayInput) -> str:
    """Mark a day as a holiday. Marking the same day twice is harmless."""
    try:
        added = get_context().holidays.add_holiday(params.date)
    except TimesheetError as e:
        return f"Error: {e}"
    if not added:
        return f"{params.date} is already a holiday."
    logger.info("Added holiday %s", params.date)
    return f"{params.date} marked as a holiday."


@mcp.tool(
    name="timesheet_holiday_remove",
    annotations=ToolAnnotations(
        title="Remove Holiday",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_holiday_remove(params: HolidayInput) -> str:
    """Unmark a holiday."""
    try:
        removed = get_context().holidays.remove_holiday(params.date)
    except TimesheetError as e:
        return f"Error: {e}"
    if not removed:
        return f"{params.date} is not a holiday."
    logger.info("Removed holiday %s", params.date)
    return f"{params.date} is no longer a holiday."
