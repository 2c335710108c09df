# This project was developed with assistance from AI tools.
"""Overdue checklist item report.

An item is overdue when it is still pending and its due date has passed.
Read-only; nothing here changes item state.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from db import ChecklistItem

from .store import ChecklistStore


@dataclass(frozen=True)
class OverdueItem:
    item: ChecklistItem
    employee_id: int
    checklist_id: int
    days_overdue: int


def days_overdue(due_date: datetime, now: datetime) -> int:
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=UTC)
    return max((now - due_date).days, 0)


async def list_overdue_items(
    store: ChecklistStore,
    now: datetime | None = None,
    *,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[OverdueItem], int]:
    """Return pending items past their due date, most overdue first."""
    now = now or datetime.now(UTC)
    total = await store.count_overdue_items(now)
    items = await store.list_overdue_items(now, offset=offset, limit=limit)
    report = [
        OverdueItem(
            item=item,
            employee_id=item.checklist.employee_id,
            checklist_id=item.checklist_id,
            days_overdue=days_overdue(item.due_date, now),
        )
        for item in items
    ]
    return report, total
