"""Utility functions for Timesheet MCP."""

from timesheet_mcp.utils.formatters import (
    _format_entries_markdown,
    _format_invoice_markdown,
    _format_period_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from timesheet_mcp.utils.logging_setup import setup_logging
from timesheet_mcp.utils.parsers import _parse_entries, _parse_entry, _parse_project, _parse_projects

__all__ = [
    "setup_logging",
    "_parse_entry",
    "_parse_entries",
    "_parse_project",
    "_parse_projects",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    "_format_entries_markdown",
    "_format_period_markdown",
    "_format_invoice_markdown",
]
