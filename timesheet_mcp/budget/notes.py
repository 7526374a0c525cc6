"""Checklist codec for task notes.

Notes are stored as a single string. Lines of the form::

    - [ ] Build API (3.5h)
    - [x] Design mockups (2h)

are checklist items; the ``(Nh)`` suffix is optional when parsing and always
written when serializing. Every other non-blank line is free text and is kept
verbatim. Blank lines are dropped.
"""

import math
import re
from decimal import Decimal

from timesheet_mcp.models.task import ChecklistItem, NotesDocument

_ITEM_RE = re.compile(r"^- \[(?P<mark>[ xX])\] (?P<text>.+?)(?:\s*\((?P<hours>\d+(?:\.\d+)?|\.\d+)h\))?$")


def _format_hours(hours: float) -> str:
    """Render hours in plain decimal notation without trailing zeros: 2 -> "2", 1e-07 -> "0.0000001".

    The shortest repr is expanded exactly, so float(_format_hours(h)) == h.
    """
    if hours == 0:
        return "0"
    text = format(Decimal(repr(float(hours))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _parse_item(line: str, position: int) -> ChecklistItem | None:
    match = _ITEM_RE.match(line.rstrip())
    if not match:
        return None
    text = match.group("text").strip()
    if not text:
        return None
    hours = float(match.group("hours") or 0.0)
    if not math.isfinite(hours):
        return None
    return ChecklistItem(
        text=text,
        checked=match.group("mark") != " ",
        hours=hours,
        position=position,
    )


def parse_notes(notes: str | None) -> NotesDocument:
    """
    Split a notes string into checklist items and free-text lines.

    Args:
        notes: Stored notes text (None is treated as empty)

    Returns:
        NotesDocument with items in source order and the remaining lines
    """
    doc = NotesDocument()
    if not notes:
        return doc

    for position, line in enumerate(notes.splitlines()):
        if not line.strip():
            continue
        item = _parse_item(line, position)
        if item is not None:
            doc.checklist.append(item)
        else:
            doc.free_text.append(line)
    return doc


def format_checklist_line(item: ChecklistItem) -> str:
    mark = "x" if item.checked else " "
    return f"- [{mark}] {item.text} ({_format_hours(item.hours)}h)"


def serialize_notes(checklist: list[ChecklistItem], free_text: list[str]) -> str:
    """
    Render checklist items followed by free-text lines.

    Every item carries an explicit hours suffix, so a parsed item without one
    comes back annotated with ``(0h)``.
    """
    lines = [format_checklist_line(item) for item in checklist]
    lines.extend(free_text)
    return "\n".join(lines)


def render_document(doc: NotesDocument) -> str:
    return serialize_notes(doc.checklist, doc.free_text)
