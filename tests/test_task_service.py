"""Tests for the task aggregator and TaskBudgetService."""

import pytest

from timesheet_mcp.budget.aggregator import budget_status, compute_task
from timesheet_mcp.enums import BudgetStatus, TaskState
from timesheet_mcp.errors import ConflictError, NotFoundError, StorageError, ValidationError


def _log(entry_repo, project, description, hours, day="2025-03-04"):
    return entry_repo.add_entry(day, project, description, hours)


# ============================================================================
# Aggregator
# ============================================================================


class TestComputeTask:
    """Tests for compute_task and budget_status."""

    def test_defaults_for_missing_fields(self):
        """Test a row without budget or notes."""
        task = compute_task({"project_name": "Acme", "description": "Build API"}, 3.0)

        assert task.id == "Acme|Build API"
        assert task.budgeted_hours == 0.0
        assert task.notes == ""
        assert task.hours_remaining == -3.0
        assert task.completion_percentage is None
        assert task.budget_status == BudgetStatus.NO_BUDGET

    def test_derived_fields(self):
        """Test remaining hours, checklist, and completion come from the row."""
        row = {
            "id": "Acme|Build API",
            "project_name": "Acme",
            "description": "Build API",
            "budgeted_hours": 10,
            "notes": "- [x] Schema (2h)\n- [ ] Endpoints (2h)",
            "is_closed": 1,
        }
        task = compute_task(row, 4.5)

        assert task.hours_billed == 4.5
        assert task.hours_remaining == 5.5
        assert task.is_closed is True
        assert len(task.checklist) == 2
        assert task.completion_percentage == 50
        assert task.budget_status == BudgetStatus.ON_TRACK

    @pytest.mark.parametrize(
        "budgeted,remaining,expected",
        [
            (0, 0, BudgetStatus.NO_BUDGET),
            (10, 5, BudgetStatus.ON_TRACK),
            (10, 2, BudgetStatus.NEAR_LIMIT),
            (10, 0.5, BudgetStatus.NEAR_LIMIT),
            (10, 0, BudgetStatus.OVER_BUDGET),
            (10, -3, BudgetStatus.OVER_BUDGET),
        ],
    )
    def test_budget_status(self, budgeted, remaining, expected):
        """Test the status thresholds."""
        assert budget_status(budgeted, remaining) == expected


# ============================================================================
# Reads and lazy creation
# ============================================================================


class TestGetOrCreate:
    """Tests for lazy task creation and reads."""

    def test_creates_empty_task(self, service):
        """Test the first lookup creates a task with no budget or notes."""
        assert service.get_task("Acme", "Build API") is None

        task = service.get_or_create_task("Acme", "Build API")

        assert task.id == "Acme|Build API"
        assert task.budgeted_hours == 0
        assert task.notes == ""
        assert task.is_closed is False
        assert task.created_at is not None

    def test_second_lookup_returns_same_task(self, service):
        """Test get_or_create does not reset an existing task."""
        first = service.update_task("Acme", "Build API", budgeted_hours=8)
        again = service.get_or_create_task("Acme", "Build API")
        assert again.created_at == first.created_at
        assert again.budgeted_hours == 8

    def test_descriptions_are_trimmed(self, service):
        """Test surrounding whitespace does not create a second task."""
        service.get_or_create_task("Acme", "  Build API ")
        assert service.get_task("Acme", "Build API") is not None
        assert len(service.list_tasks()) == 1

    def test_empty_description_rejected(self, service):
        """Test an empty or whitespace description is a validation error."""
        with pytest.raises(ValidationError):
            service.get_or_create_task("Acme", "   ")

    def test_separator_in_project_rejected(self, service):
        """Test a project name containing '|' is refused so task ids stay unique."""
        with pytest.raises(ValidationError):
            service.get_or_create_task("a|b", "c")
        with pytest.raises(ValidationError):
            service.update_task("a|b", "c", budgeted_hours=1)

    def test_separator_allowed_in_description(self, service):
        """Test a description may contain '|' and still addresses one task."""
        task = service.get_or_create_task("a", "b|c")
        assert task.id == "a|b|c"
        assert service.get_task_by_id("a|b|c").description == "b|c"

    def test_billed_hours_from_entries(self, service, entry_repo):
        """Test hours billed is the sum of matching entries only."""
        _log(entry_repo, "Acme", "Build API", 2)
        _log(entry_repo, "Acme", "Build API", 1.5, day="2025-03-05")
        _log(entry_repo, "Acme", "Other", 4)
        _log(entry_repo, "Globex", "Build API", 4)
        service.update_task("Acme", "Build API", budgeted_hours=4)

        task = service.get_task("Acme", "Build API")
        assert task.hours_billed == 3.5
        assert task.hours_remaining == 0.5
        assert task.budget_status == BudgetStatus.NEAR_LIMIT

    def test_get_task_by_id(self, service):
        """Test lookup by the composite id."""
        service.get_or_create_task("Acme", "Build API")
        assert service.get_task_by_id("Acme|Build API").description == "Build API"
        assert service.get_task_by_id("Acme|Nope") is None


class TestListTasks:
    """Tests for list_tasks filters and ordering."""

    @pytest.fixture
    def populated(self, service, entry_repo):
        service.update_task("Globex", "Zeta", budgeted_hours=5)
        service.update_task("Acme", "Build API", budgeted_hours=10)
        service.update_task("Acme", "Alpha", budgeted_hours=2)
        service.get_or_create_task("Acme", "No budget")
        service.set_closed("Acme", "Alpha", True)
        _log(entry_repo, "Acme", "Alpha", 3)
        return service

    def test_sorted_by_project_then_description(self, populated):
        """Test the default order."""
        assert [t.id for t in populated.list_tasks()] == [
            "Acme|Alpha",
            "Acme|Build API",
            "Acme|No budget",
            "Globex|Zeta",
        ]

    def test_state_filter(self, populated):
        """Test open and closed filters."""
        assert [t.description for t in populated.list_tasks(state=TaskState.CLOSED)] == ["Alpha"]
        assert "Alpha" not in [t.description for t in populated.list_tasks(state=TaskState.OPEN)]

    def test_project_and_search(self, populated):
        """Test project filter and case-insensitive search."""
        assert len(populated.list_tasks(project="Acme")) == 3
        assert [t.id for t in populated.list_tasks(search="API")] == ["Acme|Build API"]
        assert [t.id for t in populated.list_tasks(search="zeta")] == ["Globex|Zeta"]

    def test_budget_filters(self, populated):
        """Test budget_left, has_budget, and no_budget."""
        assert [t.description for t in populated.list_tasks(budget_left=True)] == ["Build API", "Zeta"]
        assert [t.description for t in populated.list_tasks(has_budget=True)] == ["Alpha", "Build API", "Zeta"]
        assert [t.description for t in populated.list_tasks(no_budget=True)] == ["No budget"]

    def test_billed_hours_in_list(self, populated):
        """Test list results carry billed hours."""
        alpha = populated.list_tasks(search="alpha")[0]
        assert alpha.hours_billed == 3
        assert alpha.budget_status == BudgetStatus.OVER_BUDGET


# ============================================================================
# Updates, close, delete
# ============================================================================


class TestUpdateTask:
    """Tests for update_task, set_closed, and delete_task."""

    def test_upsert_creates(self, service):
        """Test updating a missing task creates it."""
        task = service.update_task("Acme", "Build API", budgeted_hours=6, notes="hello")
        assert task.budgeted_hours == 6
        assert task.notes == "hello"

    def test_partial_update_keeps_other_fields(self, service):
        """Test fields left out keep their stored values."""
        service.update_task("Acme", "Build API", budgeted_hours=6, notes="hello")
        task = service.update_task("Acme", "Build API", notes="changed")
        assert task.budgeted_hours == 6
        assert task.notes == "changed"

        task = service.update_task("Acme", "Build API", budgeted_hours=2)
        assert task.notes == "changed"

    def test_update_refreshes_updated_at(self, service):
        """Test updated_at moves forward and created_at stays."""
        first = service.update_task("Acme", "Build API", budgeted_hours=1)
        second = service.update_task("Acme", "Build API", budgeted_hours=2)
        assert second.created_at == first.created_at
        assert second.updated_at >= first.updated_at

    def test_negative_budget_rejected(self, service):
        """Test a negative budget is refused before anything is written."""
        with pytest.raises(ValidationError):
            service.update_task("Acme", "Build API", budgeted_hours=-1)
        assert service.get_task("Acme", "Build API") is None

    @pytest.mark.parametrize("budget", [float("inf"), float("nan")])
    def test_non_finite_budget_rejected(self, service, budget):
        """Test an infinite or NaN budget is refused before anything is written."""
        with pytest.raises(ValidationError):
            service.update_task("Acme", "Build API", budgeted_hours=budget)
        assert service.get_task("Acme", "Build API") is None

        service.get_or_create_task("Acme", "Old")
        with pytest.raises(ValidationError):
            service.rename_task("Acme", "Old", "New", budgeted_hours=budget)
        assert service.get_task("Acme", "Old") is not None

    def test_close_and_reopen(self, service):
        """Test set_closed flips the flag both ways."""
        service.get_or_create_task("Acme", "Build API")
        assert service.set_closed("Acme", "Build API", True).is_closed is True
        assert service.set_closed("Acme", "Build API", False).is_closed is False

    def test_close_missing_task(self, service):
        """Test closing an unknown task raises NotFoundError."""
        with pytest.raises(NotFoundError):
            service.set_closed("Acme", "Nope", True)

    def test_delete_keeps_entries(self, service, entry_repo):
        """Test deleting a task leaves its time entries alone."""
        _log(entry_repo, "Acme", "Build API", 2)
        service.update_task("Acme", "Build API", budgeted_hours=5)

        service.delete_task("Acme", "Build API")

        assert service.get_task("Acme", "Build API") is None
        assert entry_repo.sum_hours("Acme", "Build API") == 2

    def test_delete_missing_task(self, service):
        """Test deleting an unknown task raises NotFoundError."""
        with pytest.raises(NotFoundError):
            service.delete_task("Acme", "Nope")


# ============================================================================
# Rename
# ============================================================================


class TestRenameTask:
    """Tests for the cascading rename."""

    def test_rename_moves_entries_and_task(self, service, entry_repo):
        """Test entries follow the task and billed hours are unchanged."""
        _log(entry_repo, "Acme", "API", 2)
        _log(entry_repo, "Acme", "API", 3, day="2025-03-05")
        _log(entry_repo, "Globex", "API", 7)
        before = service.update_task("Acme", "API", budgeted_hours=10, notes="- [ ] Schema (2h)")
        service.set_closed("Acme", "API", True)

        renamed = service.rename_task("Acme", "API", "Build API")

        assert renamed.id == "Acme|Build API"
        assert renamed.hours_billed == before.hours_billed == 5
        assert renamed.budgeted_hours == 10
        assert renamed.notes == "- [ ] Schema (2h)"
        assert renamed.is_closed is True
        assert renamed.created_at == before.created_at
        assert service.get_task("Acme", "API") is None
        assert entry_repo.sum_hours("Acme", "API") == 0
        assert entry_repo.sum_hours("Globex", "API") == 7

    def test_rename_refreshes_entry_updated_at(self, service, entry_repo):
        """Test moved entries keep their id but get a new updated_at."""
        entry = _log(entry_repo, "Acme", "API", 2)
        service.get_or_create_task("Acme", "API")

        service.rename_task("Acme", "API", "Build API")

        moved = entry_repo.get_entry(entry["id"])
        assert moved["description"] == "Build API"
        assert moved["created_at"] == entry["created_at"]
        assert moved["updated_at"] >= entry["updated_at"]

    def test_rename_applies_new_budget_and_notes(self, service):
        """Test a budget and notes given with the rename land on the new task."""
        service.update_task("Acme", "API", budgeted_hours=10, notes="old")
        renamed = service.rename_task("Acme", "API", "Build API", budgeted_hours=12, notes="new")
        assert renamed.budgeted_hours == 12
        assert renamed.notes == "new"

    def test_rename_conflict_changes_nothing(self, service, entry_repo):
        """Test renaming onto an existing task fails and leaves both tasks intact."""
        _log(entry_repo, "Acme", "A", 2)
        _log(entry_repo, "Acme", "B", 1)
        service.update_task("Acme", "A", budgeted_hours=5, notes="a notes")
        service.update_task("Acme", "B", budgeted_hours=3, notes="b notes")

        with pytest.raises(ConflictError):
            service.rename_task("Acme", "A", "B")

        a = service.get_task("Acme", "A")
        b = service.get_task("Acme", "B")
        assert (a.budgeted_hours, a.notes, a.hours_billed) == (5, "a notes", 2)
        assert (b.budgeted_hours, b.notes, b.hours_billed) == (3, "b notes", 1)

    def test_rename_missing_task(self, service, entry_repo):
        """Test renaming an unknown task raises NotFoundError and moves no entries."""
        _log(entry_repo, "Acme", "Ghost", 2)
        with pytest.raises(NotFoundError):
            service.rename_task("Acme", "Ghost", "Real")
        assert entry_repo.sum_hours("Acme", "Ghost") == 2

    def test_rename_to_same_description_is_update(self, service):
        """Test a rename that only changes whitespace behaves like an update."""
        service.update_task("Acme", "API", budgeted_hours=4)
        task = service.rename_task("Acme", "API", "  API  ", budgeted_hours=6)
        assert task.id == "Acme|API"
        assert task.budgeted_hours == 6

    def test_rename_rejects_empty_description(self, service):
        """Test an empty new description is a validation error."""
        service.get_or_create_task("Acme", "API")
        with pytest.raises(ValidationError):
            service.rename_task("Acme", "API", "  ")

    def test_failed_rename_rolls_back_entries(self, service, task_repo, entry_repo, monkeypatch):
        """Test entries are restored when replacing the task row fails."""
        _log(entry_repo, "Acme", "API", 2)
        service.update_task("Acme", "API", budgeted_hours=5)

        def boom(*args, **kwargs):
            raise StorageError("disk full")

        monkeypatch.setattr(task_repo, "rename_task_identity", boom)

        with pytest.raises(StorageError):
            service.rename_task("Acme", "API", "Build API")

        assert entry_repo.sum_hours("Acme", "API") == 2
        assert entry_repo.sum_hours("Acme", "Build API") == 0
        assert service.get_task("Acme", "API").budgeted_hours == 5


# ============================================================================
# Checklist
# ============================================================================


class TestChecklist:
    """Tests for checklist edits through the service."""

    def test_add_items_creates_task(self, service):
        """Test adding an item to a new task creates it."""
        service.add_item("Acme", "Build API", "Schema", 2)
        task = service.add_item("Acme", "Build API", "Endpoints", 3.5)

        assert task.notes == "- [ ] Schema (2h)\n- [ ] Endpoints (3.5h)"
        assert [i.text for i in task.checklist] == ["Schema", "Endpoints"]
        assert task.completion_percentage == 0

    def test_toggle_flips_and_sets(self, service):
        """Test toggling without a value flips; with a value sets."""
        service.update_task("Acme", "T", notes="- [ ] A (1h)\n- [ ] B (3h)")

        task = service.toggle_item("Acme", "T", 2)
        assert task.checklist[1].checked is True
        assert task.completion_percentage == 75

        task = service.toggle_item("Acme", "T", 2)
        assert task.checklist[1].checked is False

        task = service.toggle_item("Acme", "T", 1, checked=True)
        task = service.toggle_item("Acme", "T", 1, checked=True)
        assert task.checklist[0].checked is True

    def test_edit_item(self, service):
        """Test changing an item's text and hours."""
        service.update_task("Acme", "T", notes="- [x] A (1h)")
        task = service.edit_item("Acme", "T", 1, text="Renamed", hours=4)
        assert task.notes == "- [x] Renamed (4h)"

    def test_remove_item_keeps_free_text(self, service):
        """Test removing an item leaves free text in place."""
        service.update_task("Acme", "T", notes="- [ ] A (1h)\nremember this\n- [ ] B (2h)")
        task = service.remove_item("Acme", "T", 1)
        assert task.notes == "- [ ] B (2h)\nremember this"

    @pytest.mark.parametrize("number", [0, 3, -1])
    def test_bad_item_number(self, service, number):
        """Test out-of-range item numbers are rejected."""
        service.update_task("Acme", "T", notes="- [ ] A (1h)\n- [ ] B (2h)")
        with pytest.raises(ValidationError):
            service.toggle_item("Acme", "T", number)
        with pytest.raises(ValidationError):
            service.remove_item("Acme", "T", number)

    def test_negative_item_hours_rejected(self, service):
        """Test negative hours on an item are refused."""
        with pytest.raises(ValidationError):
            service.add_item("Acme", "T", "A", -1)

    @pytest.mark.parametrize("hours", [float("inf"), float("nan")])
    def test_non_finite_item_hours_rejected(self, service, hours):
        """Test infinite or NaN hours never reach the stored notes."""
        service.update_task("Acme", "T", notes="- [ ] A (1h)")
        with pytest.raises(ValidationError):
            service.add_item("Acme", "T", "Spec", hours)
        with pytest.raises(ValidationError):
            service.edit_item("Acme", "T", 1, hours=hours)
        assert service.get_task("Acme", "T").notes == "- [ ] A (1h)"

    def test_precise_item_hours_survive_storage(self, service):
        """Test item hours are stored without rounding."""
        task = service.add_item("Acme", "T", "Spec", 0.1234567)
        assert task.notes == "- [ ] Spec (0.1234567h)"
        assert service.get_task("Acme", "T").checklist[0].hours == 0.1234567

    def test_autosplit(self, service):
        """Test auto-split spreads the budget and keeps checks and free text."""
        service.update_task(
            "Acme", "T", budgeted_hours=10, notes="- [x] Design\n- [ ] Build (8h)\n- [ ] Ship\nnotes here"
        )
        task = service.autosplit("Acme", "T")
        assert task.notes == "- [x] Design (3h)\n- [ ] Build (3.5h)\n- [ ] Ship (3.5h)\nnotes here"

    def test_autosplit_without_budget_is_noop(self, service):
        """Test auto-split leaves a task without budget untouched."""
        service.update_task("Acme", "T", notes="- [ ] A (2h)")
        assert service.autosplit("Acme", "T").notes == "- [ ] A (2h)"
