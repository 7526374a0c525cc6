"""Formatting utilities for tool output."""

from timesheet_mcp.budget.notes import format_checklist_line, parse_notes
from timesheet_mcp.enums import BudgetStatus
from timesheet_mcp.models.records import ProjectModel, TimeEntryModel
from timesheet_mcp.models.reports import Invoice, MonthlyStatement, PeriodSummary
from timesheet_mcp.models.task import TaskModel

_STATUS_LABEL = {
    BudgetStatus.NO_BUDGET: "no budget",
    BudgetStatus.ON_TRACK: "on track",
    BudgetStatus.NEAR_LIMIT: "near limit",
    BudgetStatus.OVER_BUDGET: "over budget",
}


def _format_hours(hours: float) -> str:
    # display only; stored notes keep full precision
    text = f"{hours:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _format_completion(task: TaskModel) -> str:
    if task.completion_percentage is None:
        return "-"
    return f"{task.completion_percentage:.0f}%"


# ============================================================================
# Tasks
# ============================================================================


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "Acme|Build API: 3/10h billed, 7h left (70%)"
    """
    line = f"{task.id}: {_format_hours(task.hours_billed)}/{_format_hours(task.budgeted_hours)}h billed"
    if task.budgeted_hours > 0:
        line += f", {_format_hours(task.hours_remaining)}h left"
    if task.completion_percentage is not None:
        line += f" ({_format_completion(task)})"
    if task.is_closed:
        line += " [closed]"
    return line


def _format_tasks_concise(tasks: list[TaskModel], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | project:Acme
    Acme|Build API: 3/10h billed, 7h left
    Acme|Design: 2/0h billed
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"
    return "\n".join([header, *(_format_task_concise(t) for t in tasks)])


def _format_task_markdown(task: TaskModel) -> str:
    """Format a single task as markdown, checklist included."""
    state = " (closed)" if task.is_closed else ""
    lines = [f"### {task.description}{state}"]

    details = [
        f"**Project**: {task.project_name}",
        f"**Budget**: {_format_hours(task.budgeted_hours)}h",
        f"**Billed**: {_format_hours(task.hours_billed)}h",
    ]
    if task.budgeted_hours > 0:
        details.append(f"**Remaining**: {_format_hours(task.hours_remaining)}h ({_STATUS_LABEL[task.budget_status]})")
    if task.completion_percentage is not None:
        details.append(f"**Complete**: {_format_completion(task)}")
    lines.append(" | ".join(details))

    if task.checklist:
        lines.append("**Checklist:**")
        for number, item in enumerate(task.checklist, start=1):
            lines.append(f"  {number}. {format_checklist_line(item)}")

    free_text = parse_notes(task.notes).free_text
    if free_text:
        lines.append("**Notes:**")
        lines.extend(f"  {line}" for line in free_text)

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[TaskModel], title: str = "Tasks") -> str:
    """Format a list of tasks as a markdown table."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [
        f"# {title}",
        f"*{len(tasks)} task(s)*",
        "",
        "| Project | Task | Budget | Billed | Remaining | Complete | Status |",
        "|---------|------|--------|--------|-----------|----------|--------|",
    ]
    for t in tasks:
        remaining = f"{_format_hours(t.hours_remaining)}h" if t.budgeted_hours > 0 else "-"
        status = "closed" if t.is_closed else _STATUS_LABEL[t.budget_status]
        lines.append(
            f"| {t.project_name} | {t.description} | {_format_hours(t.budgeted_hours)}h | "
            f"{_format_hours(t.hours_billed)}h | {remaining} | {_format_completion(t)} | {status} |"
        )
    return "\n".join(lines)


# ============================================================================
# Entries, projects, holidays
# ============================================================================


def _format_entries_concise(entries: list[TimeEntryModel]) -> str:
    if not entries:
        return "0 entries"
    lines = [f"{len(entries)} entr{'y' if len(entries) == 1 else 'ies'}"]
    for e in entries:
        lines.append(f"{e.id[:8]} {e.date} {e.project}|{e.description} {_format_hours(e.hours)}h")
    return "\n".join(lines)


def _format_entries_markdown(entries: list[TimeEntryModel], title: str = "Time Entries") -> str:
    if not entries:
        return f"# {title}\n\nNo entries found."

    total = sum(e.hours for e in entries)
    lines = [
        f"# {title}",
        f"*{len(entries)} entries, {_format_hours(total)}h total*",
        "",
        "| Date | Project | Description | Hours | ID |",
        "|------|---------|-------------|-------|----|",
    ]
    for e in entries:
        lines.append(f"| {e.date} | {e.project} | {e.description} | {_format_hours(e.hours)} | {e.id} |")
    return "\n".join(lines)


def _format_projects_markdown(projects: list[ProjectModel]) -> str:
    if not projects:
        return "# Projects\n\nNo projects found."

    lines = ["# Projects", ""]
    for p in projects:
        state = "" if p.is_active else " (inactive)"
        line = f"- **{p.name}**{state} `{p.color}`"
        if p.description:
            line += f": {p.description}"
        lines.append(line)
        lines.append(f"  - id: {p.id}")
    return "\n".join(lines)


def _format_projects_concise(projects: list[ProjectModel]) -> str:
    if not projects:
        return "0 projects"
    return "\n".join(f"{p.name}{'' if p.is_active else ' [inactive]'}" for p in projects)


def _format_holidays(holidays: list[str], start: str, end: str) -> str:
    if not holidays:
        return f"No holidays between {start} and {end}."
    return "\n".join([f"# Holidays {start} to {end}", "", *(f"- {h}" for h in holidays)])


# ============================================================================
# Reports
# ============================================================================


def _format_period_markdown(summary: PeriodSummary, title: str, hourly_rate: float | None = None) -> str:
    """Format a weekly or monthly summary as markdown."""
    lines = [
        f"# {title}",
        f"*{summary.start_date} to {summary.end_date}*",
        "",
        f"**Total**: {_format_hours(summary.total_hours)}h | "
        f"**Days worked**: {summary.days_worked} | "
        f"**Average/day**: {summary.average_daily_hours:.2f}h",
    ]
    if hourly_rate is not None:
        lines.append(f"**Estimated earnings**: {summary.total_hours * hourly_rate:,.2f} @ {hourly_rate:g}/h")

    if summary.project_breakdown:
        lines.extend(["", "## By Project"])
        for project, hours in sorted(summary.project_breakdown.items(), key=lambda kv: -kv[1]):
            pct = 100 * hours / summary.total_hours if summary.total_hours else 0
            lines.append(f"- {project}: {_format_hours(hours)}h ({pct:.0f}%)")

    lines.extend(["", "## By Day"])
    holidays = set(summary.holidays)
    for day, hours in summary.daily_breakdown.items():
        suffix = " (holiday)" if day in holidays else ""
        lines.append(f"- {day}: {_format_hours(hours)}h{suffix}")

    return "\n".join(lines)


def _format_period_concise(summary: PeriodSummary) -> str:
    parts = [f"{summary.start_date}..{summary.end_date}: {_format_hours(summary.total_hours)}h"]
    parts.extend(f"{p}:{_format_hours(h)}h" for p, h in summary.project_breakdown.items())
    return " | ".join(parts)


def _format_statement_markdown(statement: MonthlyStatement) -> str:
    lines = [
        f"# Statement: {statement.month} {statement.year}",
        f"**Total**: {_format_hours(statement.total_hours)}h | "
        f"**Earnings**: {statement.total_earnings:,.2f} @ {statement.hourly_rate:g}/h",
        "",
        "## By Project",
    ]
    for project, totals in statement.project_summary.items():
        lines.append(f"- {project}: {_format_hours(totals.hours)}h = {totals.earnings:,.2f}")

    lines.extend(["", "## Entries", "", "| Date | Project | Description | Hours |", "|------|---------|-------------|-------|"])
    for e in statement.entries:
        lines.append(f"| {e.date} | {e.project} | {e.description} | {_format_hours(e.hours)} |")
    return "\n".join(lines)


def _format_invoice_markdown(invoice: Invoice) -> str:
    cur = invoice.currency
    lines = [
        f"# Invoice {invoice.invoice_number}",
        f"**Bill to**: {invoice.customer_name}",
        f"**Issued**: {invoice.issue_date} | **Due**: {invoice.due_date}",
        "",
        "| Project | Description | Qty | Unit price | Amount |",
        "|---------|-------------|-----|------------|--------|",
    ]
    for item in invoice.line_items:
        lines.append(
            f"| {item.project} | {item.description} | {item.quantity:.2f} | "
            f"{item.unit_price:,.2f} | {item.total:,.2f} |"
        )

    lines.extend(["", f"**Subtotal**: {invoice.subtotal:,.2f} {cur}"])
    for adj in invoice.adjustments:
        lines.append(f"- {adj.description}: {adj.amount:,.2f} {cur}")
    lines.extend(
        [
            f"**Total excluding tax**: {invoice.total_excluding_tax:,.2f} {cur}",
            f"**Tax**: {invoice.tax:,.2f} {cur}",
            f"**Amount due**: {invoice.amount_due:,.2f} {cur} by {invoice.due_date}",
        ]
    )
    return "\n".join(lines)
