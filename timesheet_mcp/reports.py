"""Weekly/monthly summaries, monthly statements, and invoices.

All functions are pure: callers load entries and holidays from storage and
pass them in.
"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Iterable
from datetime import date, timedelta

from timesheet_mcp.errors import ValidationError
from timesheet_mcp.models.records import TimeEntryModel
from timesheet_mcp.models.reports import (
    Invoice,
    InvoiceLineItem,
    LineAdjustment,
    MonthlyStatement,
    PeriodSummary,
    ProjectTotals,
)

logger = logging.getLogger(__name__)

INVOICE_NUMBER_RE = re.compile(r"^INV-\d+$")


def _money(value: float) -> float:
    return round(value, 2)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, raising ValidationError on anything else."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date '{value}': expected YYYY-MM-DD") from e


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing day."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12 (got {month})")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def summarize_entries(
    entries: Iterable[TimeEntryModel],
    start: date,
    end: date,
    holidays: Iterable[str] = (),
) -> PeriodSummary:
    """
    Total hours between start and end (inclusive), per project and per day.

    Every day of the range appears in the daily breakdown, with 0 for days
    without entries. Entries outside the range are ignored.
    """
    start_s, end_s = start.isoformat(), end.isoformat()
    daily: dict[str, float] = {}
    day = start
    while day <= end:
        daily[day.isoformat()] = 0.0
        day += timedelta(days=1)

    by_project: dict[str, float] = {}
    total = 0.0
    for entry in entries:
        if not start_s <= entry.date <= end_s:
            continue
        total += entry.hours
        by_project[entry.project] = by_project.get(entry.project, 0.0) + entry.hours
        daily[entry.date] = daily.get(entry.date, 0.0) + entry.hours

    logger.debug("Summarized %s..%s: %.2fh over %d projects", start_s, end_s, total, len(by_project))
    return PeriodSummary(
        start_date=start_s,
        end_date=end_s,
        total_hours=total,
        project_breakdown=dict(sorted(by_project.items())),
        daily_breakdown=daily,
        holidays=sorted(h for h in holidays if start_s <= h <= end_s),
    )


def build_monthly_statement(
    entries: Iterable[TimeEntryModel],
    year: int,
    month: int,
    hourly_rate: float,
) -> MonthlyStatement:
    """
    Collect a month's entries, sorted by date then project, with earnings per project.

    Args:
        entries: Time entries (anything outside the month is dropped)
        year: Statement year
        month: Statement month, 1-12
        hourly_rate: Rate applied to every hour

    Returns:
        MonthlyStatement with totals and a per-project summary
    """
    if hourly_rate <= 0:
        raise ValidationError("Hourly rate must be greater than 0")
    first, last = month_bounds(year, month)
    start_s, end_s = first.isoformat(), last.isoformat()

    in_month = sorted(
        (e for e in entries if start_s <= e.date <= end_s),
        key=lambda e: (e.date, e.project),
    )

    summary: dict[str, ProjectTotals] = {}
    for entry in in_month:
        totals = summary.setdefault(entry.project, ProjectTotals())
        totals.hours += entry.hours
    for totals in summary.values():
        totals.earnings = _money(totals.hours * hourly_rate)

    total_hours = sum(e.hours for e in in_month)
    return MonthlyStatement(
        month=calendar.month_name[month],
        year=year,
        hourly_rate=hourly_rate,
        total_hours=total_hours,
        total_earnings=_money(total_hours * hourly_rate),
        entries=in_month,
        project_summary=dict(sorted(summary.items())),
    )


def build_invoice(
    statement: MonthlyStatement,
    invoice_number: str,
    customer_name: str,
    hourly_rate: float | None = None,
    adjustments: Iterable[LineAdjustment] = (),
    due_days: int = 30,
    currency: str = "CAD",
    issue_date: date | None = None,
) -> Invoice:
    """
    Turn a monthly statement into an invoice.

    Hours are grouped into one line per (project, description) and sorted by
    project then description. Adjustments are added after the subtotal; a
    negative amount is a discount. Tax is always 0.

    Raises:
        ValidationError: Bad invoice number, empty customer, non-positive
            rate, or negative due days
    """
    invoice_number = (invoice_number or "").strip()
    customer_name = (customer_name or "").strip()
    rate = statement.hourly_rate if hourly_rate is None else hourly_rate

    if not INVOICE_NUMBER_RE.match(invoice_number):
        raise ValidationError(f"Invoice number must look like INV-<digits> (got '{invoice_number}')")
    if not customer_name:
        raise ValidationError("Customer name is required")
    if rate <= 0:
        raise ValidationError("Hourly rate must be greater than 0")
    if due_days < 0:
        raise ValidationError("Due days cannot be negative")

    grouped: dict[tuple[str, str], float] = {}
    for entry in statement.entries:
        key = (entry.project, entry.description)
        grouped[key] = grouped.get(key, 0.0) + entry.hours

    line_items = [
        InvoiceLineItem(
            project=project,
            description=description,
            quantity=hours,
            unit_price=rate,
            total=_money(hours * rate),
        )
        for (project, description), hours in sorted(grouped.items())
    ]

    adjustments = list(adjustments)
    subtotal = _money(sum(item.total for item in line_items))
    adjustments_total = _money(sum(a.amount for a in adjustments))
    total_excluding_tax = _money(subtotal + adjustments_total)
    tax = 0.0
    issued = issue_date or date.today()

    logger.info("Built invoice %s for %s: %.2f %s", invoice_number, customer_name, total_excluding_tax, currency)
    return Invoice(
        invoice_number=invoice_number,
        customer_name=customer_name,
        issue_date=issued.isoformat(),
        due_date=(issued + timedelta(days=due_days)).isoformat(),
        currency=currency,
        hourly_rate=rate,
        line_items=line_items,
        adjustments=adjustments,
        subtotal=subtotal,
        adjustments_total=adjustments_total,
        total_excluding_tax=total_excluding_tax,
        tax=tax,
        amount_due=_money(total_excluding_tax + tax),
    )
