"""Pytest configuration and fixtures for timesheet-mcp tests."""

import pytest

from timesheet_mcp.budget.service import TaskBudgetService
from timesheet_mcp.config import Settings
from timesheet_mcp.context import AppContext, set_context
from timesheet_mcp.storage.db import MEMORY, Database
from timesheet_mcp.storage.repos import HolidayRepo, ProjectRepo, TaskRepo, TimeEntryRepo


@pytest.fixture
def db():
    """In-memory database with the schema applied."""
    database = Database(MEMORY)
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def task_repo(db):
    return TaskRepo(db)


@pytest.fixture
def entry_repo(db):
    return TimeEntryRepo(db)


@pytest.fixture
def project_repo(db):
    return ProjectRepo(db)


@pytest.fixture
def holiday_repo(db):
    return HolidayRepo(db)


@pytest.fixture
def service(task_repo, entry_repo):
    return TaskBudgetService(task_repo, entry_repo)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway database file with a short autosave delay."""
    return Settings(_env_file=None, db_path=tmp_path / "timesheet.db", autosave_delay=0.05)


@pytest.fixture
def app_context(settings):
    """AppContext installed for the MCP tools, removed again after the test."""
    ctx = AppContext.create(settings)
    set_context(ctx)
    yield ctx
    set_context(None)
    ctx.close()
