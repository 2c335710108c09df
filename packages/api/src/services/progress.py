# This project was developed with assistance from AI tools.
"""Checklist progress aggregation.

Progress is always recomputed from the item rows, never kept as a running
counter, so concurrent completions cannot drift it. Recompute also decides
whether the one-time activation signal fires.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from db import ChecklistInstance
from db.enums import OnboardingStatus

from .activation import ActivationEvent, dispatch_activation
from .store import Actor, ChecklistStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressSummary:
    total_items: int
    completed_items: int
    percentage: int

    @property
    def all_completed(self) -> bool:
        return self.total_items > 0 and self.completed_items == self.total_items


def compute_progress(items: Iterable) -> ProgressSummary:
    """Count completed items and derive a whole-number percentage.

    Halves round up (12.5 -> 13), and an empty checklist is 0%.
    """
    items = list(items)
    total = len(items)
    completed = sum(1 for item in items if item.is_completed)
    if total == 0:
        return ProgressSummary(total_items=0, completed_items=0, percentage=0)
    ratio = Decimal(completed * 100) / Decimal(total)
    percentage = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return ProgressSummary(total_items=total, completed_items=completed, percentage=percentage)


def status_for(summary: ProgressSummary) -> OnboardingStatus:
    if summary.all_completed:
        return OnboardingStatus.COMPLETED
    if summary.completed_items > 0:
        return OnboardingStatus.IN_PROGRESS
    return OnboardingStatus.NOT_STARTED


async def recompute(
    store: ChecklistStore,
    instance: ChecklistInstance,
    *,
    actor: Actor | None = None,
    now: datetime | None = None,
) -> tuple[ProgressSummary, ActivationEvent | None]:
    """Refresh ``instance.progress``/``status`` from the flushed item rows.

    Must run inside the caller's transaction with the instance row locked.
    Returns an ActivationEvent the first time every item is completed;
    the caller dispatches it after commit.
    """
    await store.flush()
    summary = compute_progress(await store.list_items(instance.id))

    instance.progress = summary.percentage
    instance.status = status_for(summary)

    if not summary.all_completed or instance.activated_at is not None:
        return summary, None

    activated_at = now or datetime.now(UTC)
    instance.activated_at = activated_at
    await store.audit(
        "onboarding_activated",
        actor=actor,
        checklist_id=instance.id,
        event_data={
            "employee_id": instance.employee_id,
            "total_items": summary.total_items,
            "activated_at": activated_at.isoformat(),
        },
    )
    logger.info(
        "Checklist %s for employee %s fully completed; activation signalled",
        instance.id,
        instance.employee_id,
    )
    event = ActivationEvent(
        employee_id=instance.employee_id,
        checklist_id=instance.id,
        activated_at=activated_at,
    )
    return summary, event


async def recompute_checklist(store: ChecklistStore, checklist_id: int) -> ProgressSummary | None:
    """Recompute and persist progress for one checklist.

    Returns None if the checklist is not visible to the store's scope.
    """
    if await store.get_instance(checklist_id) is None:
        return None
    instance = await store.lock_instance(checklist_id)
    summary, event = await recompute(store, instance)
    await store.commit()
    if event is not None:
        await dispatch_activation(event)
    return summary
