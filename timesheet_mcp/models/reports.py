"""Output models for reports, statements, and invoices."""

from pydantic import BaseModel, Field

from timesheet_mcp.models.records import TimeEntryModel


class PeriodSummary(BaseModel):
    """Hours logged over a date range, broken down by project and day."""

    start_date: str
    end_date: str
    total_hours: float = 0.0
    project_breakdown: dict[str, float] = Field(default_factory=dict)
    daily_breakdown: dict[str, float] = Field(default_factory=dict)
    holidays: list[str] = Field(default_factory=list)

    @property
    def days_worked(self) -> int:
        return sum(1 for hours in self.daily_breakdown.values() if hours > 0)

    @property
    def average_daily_hours(self) -> float:
        days = self.days_worked
        return self.total_hours / days if days else 0.0


class ProjectTotals(BaseModel):
    """Hours and earnings for one project in a statement."""

    hours: float = 0.0
    earnings: float = 0.0


class MonthlyStatement(BaseModel):
    """All entries of a month with per-project earnings."""

    month: str
    year: int
    hourly_rate: float
    total_hours: float = 0.0
    total_earnings: float = 0.0
    entries: list[TimeEntryModel] = Field(default_factory=list)
    project_summary: dict[str, ProjectTotals] = Field(default_factory=dict)


class LineAdjustment(BaseModel):
    """A fee (positive) or discount (negative) added to an invoice."""

    description: str = Field(..., min_length=1)
    amount: float = Field(..., allow_inf_nan=False)


class InvoiceLineItem(BaseModel):
    """Billed hours for one project and task description."""

    project: str
    description: str
    quantity: float
    unit_price: float
    total: float


class Invoice(BaseModel):
    """Invoice totals built from a monthly statement."""

    invoice_number: str
    customer_name: str
    issue_date: str
    due_date: str
    currency: str
    hourly_rate: float
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    adjustments: list[LineAdjustment] = Field(default_factory=list)
    subtotal: float = 0.0
    adjustments_total: float = 0.0
    total_excluding_tax: float = 0.0
    tax: float = 0.0
    amount_due: float = 0.0
