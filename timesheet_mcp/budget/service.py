"""Task budget service: lazy creation, budget/notes updates, rename, checklist edits."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Protocol

from timesheet_mcp.budget.aggregator import compute_task
from timesheet_mcp.budget.distributor import autosplit_checklist
from timesheet_mcp.budget.notes import parse_notes, serialize_notes
from timesheet_mcp.enums import TaskState
from timesheet_mcp.errors import ConflictError, NotFoundError, ValidationError
from timesheet_mcp.models.task import TASK_ID_SEPARATOR, ChecklistItem, TaskModel, task_id_for

logger = logging.getLogger(__name__)


class TaskStore(Protocol):
    def transaction(self) -> AbstractContextManager[None]: ...

    def get_task(self, project: str, description: str) -> Mapping[str, Any] | None: ...

    def get_task_by_id(self, task_id: str) -> Mapping[str, Any] | None: ...

    def list_tasks(self, project: str | None = None) -> list[Mapping[str, Any]]: ...

    def upsert_task(
        self, project: str, description: str, budgeted_hours: float, notes: str
    ) -> Mapping[str, Any]: ...

    def set_closed(self, project: str, description: str, closed: bool) -> bool: ...

    def delete_task_identity(self, project: str, description: str) -> bool: ...

    def rename_task_identity(
        self,
        project: str,
        old_description: str,
        new_description: str,
        *,
        budgeted_hours: float | None = None,
        notes: str | None = None,
    ) -> Mapping[str, Any]: ...


class EntryStore(Protocol):
    def sum_hours(self, project: str, description: str) -> float: ...

    def sum_hours_by_task(self) -> dict[tuple[str, str], float]: ...

    def rename_entries_description(self, project: str, old_description: str, new_description: str) -> int: ...


def _clean(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} cannot be empty")
    return cleaned


def _clean_project(value: str | None) -> str:
    # "|" separates project from description in the task id
    project = _clean(value, "Project")
    if TASK_ID_SEPARATOR in project:
        raise ValidationError(f"Project name cannot contain '{TASK_ID_SEPARATOR}' (got '{project}')")
    return project


def _check_hours(hours: float | None, field: str = "Hours") -> None:
    if hours is None:
        return
    if not math.isfinite(hours):
        raise ValidationError(f"{field} must be a finite number (got {hours})")
    if hours < 0:
        raise ValidationError(f"{field} cannot be negative (got {hours})")


class TaskBudgetService:
    """
    Budget engine entry point used by the MCP tools.

    Tasks are addressed by (project, description). Descriptions are trimmed
    before use, so " Build API " and "Build API" are the same task.
    """

    def __init__(self, tasks: TaskStore, entries: EntryStore):
        self.tasks = tasks
        self.entries = entries

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _hydrate(self, row: Mapping[str, Any], hours_billed: float | None = None) -> TaskModel:
        if hours_billed is None:
            hours_billed = self.entries.sum_hours(row["project_name"], row["description"])
        return compute_task(row, hours_billed)

    def get_task(self, project: str, description: str) -> TaskModel | None:
        project, description = _clean_project(project), _clean(description, "Description")
        row = self.tasks.get_task(project, description)
        return self._hydrate(row) if row else None

    def get_task_by_id(self, task_id: str) -> TaskModel | None:
        row = self.tasks.get_task_by_id(task_id)
        return self._hydrate(row) if row else None

    def require_task(self, project: str, description: str) -> TaskModel:
        task = self.get_task(project, description)
        if task is None:
            raise NotFoundError(f"Task '{task_id_for(project.strip(), description.strip())}' not found")
        return task

    def get_or_create_task(self, project: str, description: str) -> TaskModel:
        """Return the task, creating an empty one (no budget, no notes) if needed."""
        project, description = _clean_project(project), _clean(description, "Description")
        with self.tasks.transaction():
            row = self.tasks.get_task(project, description)
            if row is None:
                row = self.tasks.upsert_task(project, description, 0.0, "")
                logger.info("Created task %s", task_id_for(project, description))
        return self._hydrate(row)

    def list_tasks(
        self,
        project: str | None = None,
        state: TaskState = TaskState.ALL,
        search: str | None = None,
        budget_left: bool = False,
        has_budget: bool = False,
        no_budget: bool = False,
    ) -> list[TaskModel]:
        """
        List tasks ordered by project then description.

        Args:
            project: Exact project name to restrict to
            state: all, open, or closed
            search: Case-insensitive substring of the description
            budget_left: Only tasks with hours remaining > 0
            has_budget: Only tasks with a budget set
            no_budget: Only tasks without a budget
        """
        billed = self.entries.sum_hours_by_task()
        needle = search.lower() if search else None
        result: list[TaskModel] = []

        for row in self.tasks.list_tasks(project or None):
            task = self._hydrate(row, billed.get((row["project_name"], row["description"]), 0.0))
            if state == TaskState.OPEN and task.is_closed:
                continue
            if state == TaskState.CLOSED and not task.is_closed:
                continue
            if needle and needle not in task.description.lower():
                continue
            if budget_left and task.hours_remaining <= 0:
                continue
            if has_budget and task.budgeted_hours <= 0:
                continue
            if no_budget and task.budgeted_hours > 0:
                continue
            result.append(task)

        logger.debug("Listed %d tasks (project=%s, state=%s)", len(result), project, state.value)
        return result

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_task(
        self,
        project: str,
        description: str,
        budgeted_hours: float | None = None,
        notes: str | None = None,
    ) -> TaskModel:
        """
        Set budget and/or notes in place, creating the task if it is missing.

        Fields left as None keep their stored value.
        """
        project, description = _clean_project(project), _clean(description, "Description")
        _check_hours(budgeted_hours, "Budgeted hours")

        with self.tasks.transaction():
            existing = self.tasks.get_task(project, description)
            if budgeted_hours is None:
                budgeted_hours = float(existing["budgeted_hours"] or 0) if existing else 0.0
            if notes is None:
                notes = (existing["notes"] or "") if existing else ""
            row = self.tasks.upsert_task(project, description, budgeted_hours, notes)

        action = "Updated" if existing else "Created"
        logger.info("%s task %s (budget=%sh)", action, task_id_for(project, description), budgeted_hours)
        return self._hydrate(row)

    def rename_task(
        self,
        project: str,
        old_description: str,
        new_description: str,
        budgeted_hours: float | None = None,
        notes: str | None = None,
    ) -> TaskModel:
        """
        Rename a task and carry its time entries along.

        All entries of (project, old) are moved to (project, new), then the old
        task row is replaced by one at the new identity. Budget, notes, closed
        flag and created_at carry over unless a new budget or notes are given.
        Everything runs in one transaction.

        Raises:
            NotFoundError: No task at (project, old_description)
            ConflictError: Another task already uses (project, new_description)
            ValidationError: Empty description, "|" in the project, or a negative or non-finite budget
        """
        project = _clean_project(project)
        old = _clean(old_description, "Description")
        new = _clean(new_description, "New description")
        _check_hours(budgeted_hours, "Budgeted hours")

        if new == old:
            self.require_task(project, old)
            return self.update_task(project, old, budgeted_hours, notes)

        with self.tasks.transaction():
            if self.tasks.get_task(project, old) is None:
                raise NotFoundError(f"Task '{task_id_for(project, old)}' not found")
            if self.tasks.get_task(project, new) is not None:
                raise ConflictError(f"A task named '{new}' already exists in project '{project}'")
            moved = self.entries.rename_entries_description(project, old, new)
            row = self.tasks.rename_task_identity(
                project, old, new, budgeted_hours=budgeted_hours, notes=notes
            )

        logger.info(
            "Renamed task %s -> %s (%d entries moved)",
            task_id_for(project, old),
            task_id_for(project, new),
            moved,
        )
        return self._hydrate(row)

    def set_closed(self, project: str, description: str, closed: bool = True) -> TaskModel:
        project, description = _clean_project(project), _clean(description, "Description")
        if not self.tasks.set_closed(project, description, closed):
            raise NotFoundError(f"Task '{task_id_for(project, description)}' not found")
        logger.info("%s task %s", "Closed" if closed else "Reopened", task_id_for(project, description))
        return self.require_task(project, description)

    def delete_task(self, project: str, description: str) -> None:
        """Delete the task row. Time entries for the task are left alone."""
        project, description = _clean_project(project), _clean(description, "Description")
        if not self.tasks.delete_task_identity(project, description):
            raise NotFoundError(f"Task '{task_id_for(project, description)}' not found")
        logger.info("Deleted task %s", task_id_for(project, description))

    # ------------------------------------------------------------------
    # Checklist
    # ------------------------------------------------------------------

    def _save_checklist(self, task: TaskModel, checklist: list[ChecklistItem], free_text: list[str]) -> TaskModel:
        return self.update_task(task.project_name, task.description, notes=serialize_notes(checklist, free_text))

    @staticmethod
    def _index(checklist: list[ChecklistItem], number: int) -> int:
        if number < 1 or number > len(checklist):
            raise ValidationError(f"Checklist item {number} does not exist (task has {len(checklist)} items)")
        return number - 1

    def add_item(self, project: str, description: str, text: str, hours: float = 0.0) -> TaskModel:
        text = _clean(text, "Checklist item text")
        _check_hours(hours)
        task = self.get_or_create_task(project, description)
        doc = parse_notes(task.notes)
        doc.checklist.append(ChecklistItem(text=text, hours=hours, position=len(doc.checklist)))
        return self._save_checklist(task, doc.checklist, doc.free_text)

    def toggle_item(self, project: str, description: str, number: int, checked: bool | None = None) -> TaskModel:
        """Flip item ``number`` (1-based), or set it explicitly when checked is given."""
        task = self.get_or_create_task(project, description)
        doc = parse_notes(task.notes)
        i = self._index(doc.checklist, number)
        item = doc.checklist[i]
        doc.checklist[i] = item.model_copy(update={"checked": (not item.checked) if checked is None else checked})
        return self._save_checklist(task, doc.checklist, doc.free_text)

    def edit_item(
        self,
        project: str,
        description: str,
        number: int,
        text: str | None = None,
        hours: float | None = None,
    ) -> TaskModel:
        _check_hours(hours)
        task = self.get_or_create_task(project, description)
        doc = parse_notes(task.notes)
        i = self._index(doc.checklist, number)
        update: dict[str, Any] = {}
        if text is not None:
            update["text"] = _clean(text, "Checklist item text")
        if hours is not None:
            update["hours"] = hours
        doc.checklist[i] = doc.checklist[i].model_copy(update=update)
        return self._save_checklist(task, doc.checklist, doc.free_text)

    def remove_item(self, project: str, description: str, number: int) -> TaskModel:
        task = self.get_or_create_task(project, description)
        doc = parse_notes(task.notes)
        del doc.checklist[self._index(doc.checklist, number)]
        return self._save_checklist(task, doc.checklist, doc.free_text)

    def autosplit(self, project: str, description: str) -> TaskModel:
        """Spread the task's budget over its checklist items (no-op without budget or items)."""
        task = self.get_or_create_task(project, description)
        doc = parse_notes(task.notes)
        if not doc.checklist or task.budgeted_hours <= 0:
            return task
        checklist = autosplit_checklist(doc.checklist, task.budgeted_hours)
        logger.info(
            "Auto-split %sh over %d items for %s", task.budgeted_hours, len(checklist), task.id
        )
        return self._save_checklist(task, checklist, doc.free_text)
