"""Enums for Timesheet MCP."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskState(str, Enum):
    """Task open/closed filter options."""

    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"


class BudgetStatus(str, Enum):
    """How a task's billed hours compare to its budget."""

    NO_BUDGET = "no_budget"
    ON_TRACK = "on_track"
    NEAR_LIMIT = "near_limit"  # 20% or less of the budget left
    OVER_BUDGET = "over_budget"
