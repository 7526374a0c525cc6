"""MCP tool definitions for task budgets, notes, and checklists."""

import json

from mcp.types import ToolAnnotations

from timesheet_mcp.context import get_context
from timesheet_mcp.enums import ResponseFormat, TaskState
from timesheet_mcp.errors import TimesheetError
from timesheet_mcp.models.inputs import (
    AutosplitInput,
    ChecklistAddInput,
    ChecklistEditInput,
    ChecklistRemoveInput,
    ChecklistToggleInput,
    CloseTaskInput,
    DeleteTaskInput,
    DraftNotesInput,
    GetTaskInput,
    ListTasksInput,
    RenameTaskInput,
    UpdateTaskInput,
)
from timesheet_mcp.models.task import TaskModel, task_id_for
from timesheet_mcp.server import mcp
from timesheet_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)


def _render_task(task: TaskModel, response_format: ResponseFormat = ResponseFormat.MARKDOWN) -> str:
    if response_format == ResponseFormat.JSON:
        return json.dumps(task.model_dump(mode="json"), indent=2)
    if response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)
    return _format_task_markdown(task)


# ============================================================================
# Tasks
# ============================================================================


@mcp.tool(
    name="timesheet_tasks",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_tasks(params: ListTasksInput) -> str:
    """
    List tasks with their budget, billed hours, and checklist progress.

    USE THIS WHEN:
    - Reviewing which tasks are over or near their budget
    - Finding a task whose exact description you don't remember
    - Listing open or closed work for a project

    DO NOT USE WHEN:
    - You know the project and description → use timesheet_task_get instead
    - You want hours per day or per project → use timesheet_weekly_summary or timesheet_monthly_report

    Tasks are sorted by project, then description. Filters combine with AND.

    Args:
        params: ListTasksInput containing filters, limit, and response_format

    Returns:
        Formatted list of tasks (markdown table, concise lines, or JSON)

    Examples:
        - Open tasks of a project: params with project="Acme", state="open"
        - Tasks with budget left: params with budget_left=True
        - Search descriptions: params with search="api"
    """
    try:
        tasks = get_context().service.list_tasks(
            project=params.project,
            state=params.state,
            search=params.search,
            budget_left=params.budget_left,
            has_budget=params.has_budget,
            no_budget=params.no_budget,
        )
    except TimesheetError as e:
        return f"Error: {e}"

    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    title = "Tasks"
    if params.project:
        title = f"Tasks in '{params.project}'"
    if params.state != TaskState.ALL:
        title += f" ({params.state.value})"

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, f"project:{params.project}" if params.project else None)

    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="timesheet_task_get",
    annotations=ToolAnnotations(
        title="Get Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_task_get(params: GetTaskInput) -> str:
    """
    Get one task by project and description, creating it if it does not exist yet.

    A task is created with no budget and empty notes the first time it is
    looked at. Any notes draft still waiting to be saved is written first, so
    the result always reflects the latest edit.

    Args:
        params: GetTaskInput containing project, description, and response_format

    Returns:
        Task details including budget, billed and remaining hours, and checklist

    Examples:
        - params with project="Acme", description="Build API"
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.get_or_create_task(params.project, params.description)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task, params.response_format)


@mcp.tool(
    name="timesheet_task_update",
    annotations=ToolAnnotations(
        title="Update Task Budget/Notes",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_task_update(params: UpdateTaskInput) -> str:
    """
    Set a task's budgeted hours and/or notes.

    USE THIS WHEN:
    - Setting or changing the hour budget of a task
    - Replacing the whole notes text (checklist included)

    DO NOT USE WHEN:
    - Changing the description → use timesheet_task_rename instead
    - Editing one checklist item → use the timesheet_checklist_* tools
    - Saving notes while the user is still typing → use timesheet_task_draft_notes

    Omitted fields keep their current values. The task is created if missing.

    Args:
        params: UpdateTaskInput containing project, description, budgeted_hours, notes

    Returns:
        The updated task as markdown

    Examples:
        - Set a budget: params with project="Acme", description="Build API", budgeted_hours=10
        - Replace notes: params with notes="- [ ] Schema (2h)\\n- [ ] Endpoints (3h)"
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.update_task(params.project, params.description, params.budgeted_hours, params.notes)
    except TimesheetError as e:
        return f"Error: {e}"
    return f"Task updated.\n{_render_task(task)}"


@mcp.tool(
    name="timesheet_task_rename",
    annotations=ToolAnnotations(
        title="Rename Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_task_rename(params: RenameTaskInput) -> str:
    """
    Rename a task; every time entry logged against it follows the new name.

    The task keeps its budget, notes, closed state, and creation time unless a
    new budget or notes are passed. The rename is refused if another task in
    the same project already uses the new description; nothing changes then.

    Args:
        params: RenameTaskInput containing project, old_description, new_description

    Returns:
        The renamed task, or an error message

    Examples:
        - params with project="Acme", old_description="API", new_description="Build API"
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.old_description))
        task = ctx.service.rename_task(
            params.project,
            params.old_description,
            params.new_description,
            budgeted_hours=params.budgeted_hours,
            notes=params.notes,
        )
    except TimesheetError as e:
        return f"Error: {e}"
    return f"Task renamed to '{task.description}'.\n{_render_task(task)}"


@mcp.tool(
    name="timesheet_task_close",
    annotations=ToolAnnotations(
        title="Close/Reopen Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_task_close(params: CloseTaskInput) -> str:
    """
    Close a finished task, or reopen it with closed=False.

    Args:
        params: CloseTaskInput containing project, description, and closed

    Returns:
        Confirmation message
    """
    try:
        task = get_context().service.set_closed(params.project, params.description, params.closed)
    except TimesheetError as e:
        return f"Error: {e}"
    return f"Task {task.id} {'closed' if task.is_closed else 'reopened'}."


@mcp.tool(
    name="timesheet_task_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_task_delete(params: DeleteTaskInput) -> str:
    """
    Delete a task's budget and notes.

    Time entries logged against the description are kept; looking the task up
    again creates a fresh, empty task for them.

    Args:
        params: DeleteTaskInput containing project and description

    Returns:
        Confirmation message
    """
    ctx = get_context()
    key = task_id_for(params.project, params.description)
    try:
        await ctx.autosaver.flush(key)
        ctx.service.delete_task(params.project, params.description)
    except TimesheetError as e:
        return f"Error: {e}"
    return f"Task {key} deleted."


@mcp.tool(
    name="timesheet_task_draft_notes",
    annotations=ToolAnnotations(
        title="Draft Task Notes",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_task_draft_notes(params: DraftNotesInput) -> str:
    """
    Queue a notes edit that is saved once editing pauses.

    USE THIS WHEN:
    - Notes are being edited interactively and each keystroke or sentence is sent

    DO NOT USE WHEN:
    - The notes are final → use timesheet_task_update

    Only the last draft within the autosave delay is written. Reading the
    task with timesheet_task_get saves any pending draft first.

    Args:
        params: DraftNotesInput containing project, description, and notes

    Returns:
        Confirmation that the draft is queued
    """
    ctx = get_context()
    key = task_id_for(params.project, params.description)
    ctx.autosaver.schedule(key, (params.project, params.description, params.notes))
    return f"Draft queued for {key}; saving in {ctx.autosaver.delay:g}s unless edited again."


# ============================================================================
# Checklist
# ============================================================================


@mcp.tool(
    name="timesheet_checklist_add",
    annotations=ToolAnnotations(
        title="Add Checklist Item",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_checklist_add(params: ChecklistAddInput) -> str:
    """
    Append an item to a task's checklist.

    Args:
        params: ChecklistAddInput containing project, description, text, and hours

    Returns:
        The task with its updated checklist

    Examples:
        - params with project="Acme", description="Build API", text="Write tests", hours=2
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.add_item(params.project, params.description, params.text, params.hours)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task)


@mcp.tool(
    name="timesheet_checklist_toggle",
    annotations=ToolAnnotations(
        title="Toggle Checklist Item",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_checklist_toggle(params: ChecklistToggleInput) -> str:
    """
    Check or uncheck a checklist item by its 1-based number.

    Args:
        params: ChecklistToggleInput containing project, description, item, and checked

    Returns:
        The task with its updated checklist and completion
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.toggle_item(params.project, params.description, params.item, params.checked)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task)


@mcp.tool(
    name="timesheet_checklist_edit",
    annotations=ToolAnnotations(
        title="Edit Checklist Item",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_checklist_edit(params: ChecklistEditInput) -> str:
    """Change the text and/or hours of a checklist item (1-based number)."""
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.edit_item(params.project, params.description, params.item, params.text, params.hours)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task)


@mcp.tool(
    name="timesheet_checklist_remove",
    annotations=ToolAnnotations(
        title="Remove Checklist Item",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def timesheet_checklist_remove(params: ChecklistRemoveInput) -> str:
    """Remove a checklist item (1-based number); free-text notes are kept."""
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.remove_item(params.project, params.description, params.item)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task)


@mcp.tool(
    name="timesheet_checklist_autosplit",
    annotations=ToolAnnotations(
        title="Auto-split Budget",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_checklist_autosplit(params: AutosplitInput) -> str:
    """
    Spread a task's budgeted hours evenly over its checklist items.

    Hours are handed out in half-hour steps and every item gets at least 0.5h,
    so the items may add up to slightly more or less than the budget. Nothing
    changes when the task has no budget or no checklist.

    Args:
        params: AutosplitInput containing project, description, and response_format

    Returns:
        The task with the new per-item hours

    Examples:
        - 10h over 3 items: items get 3h, 3.5h, 3.5h
    """
    ctx = get_context()
    try:
        await ctx.autosaver.flush(task_id_for(params.project, params.description))
        task = ctx.service.autosplit(params.project, params.description)
    except TimesheetError as e:
        return f"Error: {e}"
    return _render_task(task, params.response_format)
