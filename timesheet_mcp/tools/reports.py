"""MCP tool definitions for summaries, statements, and invoices."""

import json
from datetime import date

from mcp.types import ToolAnnotations

from timesheet_mcp.context import get_context
from timesheet_mcp.enums import ResponseFormat
from timesheet_mcp.errors import TimesheetError
from timesheet_mcp.models.inputs import (
    InvoiceInput,
    MonthlyReportInput,
    MonthlyStatementInput,
    WeeklySummaryInput,
)
from timesheet_mcp.reports import (
    build_invoice,
    build_monthly_statement,
    month_bounds,
    parse_date,
    summarize_entries,
    week_bounds,
)
from timesheet_mcp.server import mcp
from timesheet_mcp.utils.formatters import (
    _format_invoice_markdown,
    _format_period_concise,
    _format_period_markdown,
    _format_statement_markdown,
)
from timesheet_mcp.utils.parsers import _parse_entries


def _summary_json(summary, **extra) -> str:
    data = summary.model_dump()
    data["days_worked"] = summary.days_worked
    data["average_daily_hours"] = summary.average_daily_hours
    data.update(extra)
    return json.dumps(data, indent=2)


@mcp.tool(
    name="timesheet_weekly_summary",
    annotations=ToolAnnotations(
        title="Weekly Summary",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_weekly_summary(params: WeeklySummaryInput) -> str:
    """
    Summarize the Monday-Sunday week containing a date.

    USE THIS WHEN:
    - Checking how many hours were logged this week or a past week
    - Seeing the split of the week's hours across projects

    Args:
        params: WeeklySummaryInput containing date (default today) and response_format

    Returns:
        Total, per-project and per-day hours, with holidays marked

    Examples:
        - This week: params with no date
        - Week of March 4th: params with date="2025-03-04"
    """
    ctx = get_context()
    try:
        day = parse_date(params.date) if params.date else date.today()
        start, end = week_bounds(day)
        rows = ctx.entries.list_entries(start.isoformat(), end.isoformat())
        holidays = ctx.holidays.list_holidays(start.isoformat(), end.isoformat())
    except TimesheetError as e:
        return f"Error: {e}"

    summary = summarize_entries(_parse_entries(rows), start, end, holidays)

    if params.response_format == ResponseFormat.JSON:
        return _summary_json(summary)
    if params.response_format == ResponseFormat.CONCISE:
        return _format_period_concise(summary)
    return _format_period_markdown(summary, f"Week of {summary.start_date}")


@mcp.tool(
    name="timesheet_monthly_report",
    annotations=ToolAnnotations(
        title="Monthly Report",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_monthly_report(params: MonthlyReportInput) -> str:
    """
    Report a month's hours: total, per project, per day, average per worked day,
    and estimated earnings at the hourly rate.

    Args:
        params: MonthlyReportInput containing year, month, hourly_rate, response_format

    Returns:
        Formatted monthly report

    Examples:
        - params with year=2025, month=3
    """
    ctx = get_context()
    rate = params.hourly_rate or ctx.settings.hourly_rate
    try:
        start, end = month_bounds(params.year, params.month)
        rows = ctx.entries.list_entries(start.isoformat(), end.isoformat())
        holidays = ctx.holidays.list_holidays(start.isoformat(), end.isoformat())
    except TimesheetError as e:
        return f"Error: {e}"

    summary = summarize_entries(_parse_entries(rows), start, end, holidays)

    if params.response_format == ResponseFormat.JSON:
        return _summary_json(summary, hourly_rate=rate, estimated_earnings=round(summary.total_hours * rate, 2))
    if params.response_format == ResponseFormat.CONCISE:
        return _format_period_concise(summary)
    return _format_period_markdown(summary, f"{start.strftime('%B %Y')} Report", hourly_rate=rate)


@mcp.tool(
    name="timesheet_monthly_statement",
    annotations=ToolAnnotations(
        title="Monthly Statement",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_monthly_statement(params: MonthlyStatementInput) -> str:
    """
    List every entry of a month, sorted by date then project, with hours and
    earnings per project.

    Args:
        params: MonthlyStatementInput containing year, month, hourly_rate, response_format

    Returns:
        Monthly statement
    """
    ctx = get_context()
    try:
        start, end = month_bounds(params.year, params.month)
        rows = ctx.entries.list_entries(start.isoformat(), end.isoformat())
        statement = build_monthly_statement(
            _parse_entries(rows), params.year, params.month, params.hourly_rate or ctx.settings.hourly_rate
        )
    except TimesheetError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(statement.model_dump(), indent=2)
    if params.response_format == ResponseFormat.CONCISE:
        return " | ".join(
            [f"{statement.month} {statement.year}: {statement.total_hours:g}h = {statement.total_earnings:.2f}"]
            + [f"{p}:{t.hours:g}h" for p, t in statement.project_summary.items()]
        )
    return _format_statement_markdown(statement)


@mcp.tool(
    name="timesheet_invoice",
    annotations=ToolAnnotations(
        title="Build Invoice",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def timesheet_invoice(params: InvoiceInput) -> str:
    """
    Build an invoice for a month of logged hours.

    USE THIS WHEN:
    - Billing a customer for a month's work

    DO NOT USE WHEN:
    - You only want totals → use timesheet_monthly_statement

    Hours are grouped into one line per project and task description. Add
    fees or discounts (negative amounts) through adjustments. Tax is 0. The
    invoice is returned, not stored.

    Args:
        params: InvoiceInput containing year, month, invoice_number, customer_name,
            and optional rate, adjustments, due_days, currency, issue_date

    Returns:
        Invoice as markdown or JSON

    Examples:
        - params with year=2025, month=3, invoice_number="INV-0042", customer_name="Acme Corp"
        - With a discount: adjustments=[{"description": "Loyalty discount", "amount": -100}]
    """
    ctx = get_context()
    settings = ctx.settings
    rate = params.hourly_rate or settings.hourly_rate
    try:
        start, end = month_bounds(params.year, params.month)
        rows = ctx.entries.list_entries(start.isoformat(), end.isoformat())
        statement = build_monthly_statement(_parse_entries(rows), params.year, params.month, rate)
        invoice = build_invoice(
            statement,
            invoice_number=params.invoice_number,
            customer_name=params.customer_name,
            hourly_rate=rate,
            adjustments=params.adjustments,
            due_days=settings.invoice_due_days if params.due_days is None else params.due_days,
            currency=params.currency or settings.currency,
            issue_date=parse_date(params.issue_date) if params.issue_date else None,
        )
    except TimesheetError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(invoice.model_dump(), indent=2)
    return _format_invoice_markdown(invoice)
