"""Split a task budget across checklist items in half-hour units."""

import math

from timesheet_mcp.models.task import ChecklistItem

HOUR_UNIT = 0.5
MIN_ITEM_HOURS = 0.5


def _round_to_unit(value: float) -> float:
    # round half up to the nearest HOUR_UNIT
    return math.floor(value / HOUR_UNIT + 0.5) * HOUR_UNIT


def distribute_hours(total_budget: float, item_count: int) -> list[float]:
    """
    Spread total_budget over item_count slots.

    Every slot gets at least 0.5h. Slots are then nudged up or down by 0.5h,
    round-robin, until the sum is within 0.5h of the budget or item_count full
    passes have been made. Half-hour granularity cannot hit every total
    exactly, so a residual under 0.5h is accepted.

    Args:
        total_budget: Budgeted hours to split
        item_count: Number of checklist items

    Returns:
        One value per item, or an empty list when there is nothing to split

    Raises:
        ValueError: If total_budget is infinite or NaN
    """
    if not math.isfinite(total_budget):
        raise ValueError(f"total_budget must be finite (got {total_budget})")
    if item_count <= 0 or total_budget <= 0:
        return []

    safe_base = max(MIN_ITEM_HOURS, _round_to_unit(total_budget / item_count))
    slots = [safe_base] * item_count
    difference = total_budget - safe_base * item_count

    for _ in range(item_count):
        if abs(difference) < HOUR_UNIT:
            break
        for i in range(item_count):
            if difference >= HOUR_UNIT:
                slots[i] += HOUR_UNIT
                difference -= HOUR_UNIT
            elif difference <= -HOUR_UNIT and slots[i] - HOUR_UNIT >= MIN_ITEM_HOURS:
                slots[i] -= HOUR_UNIT
                difference += HOUR_UNIT

    return slots


def autosplit_checklist(checklist: list[ChecklistItem], total_budget: float) -> list[ChecklistItem]:
    """Return a copy of checklist with hours spread evenly over its items."""
    hours = distribute_hours(total_budget, len(checklist))
    if not hours:
        return [item.model_copy() for item in checklist]
    return [item.model_copy(update={"hours": h}) for item, h in zip(checklist, hours)]
