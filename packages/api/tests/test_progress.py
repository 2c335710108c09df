# This project was developed with assistance from AI tools.
"""Tests for progress aggregation and the one-time activation trigger."""

import pytest
from db.enums import OnboardingStatus

from src.services.progress import compute_progress, recompute, recompute_checklist, status_for

from .factories import NOW, make_instance, make_item

# ---------------------------------------------------------------------------
# compute_progress
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "completed, total, expected",
    [
        (0, 25, 0),
        (1, 25, 4),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),  # 12.5 rounds half up
        (5, 8, 63),  # 62.5 rounds half up
        (25, 25, 100),
    ],
)
def test_percentage_rounding(completed, total, expected):
    items = [make_item(id=n, is_completed=n < completed) for n in range(total)]
    summary = compute_progress(items)
    assert summary.total_items == total
    assert summary.completed_items == completed
    assert summary.percentage == expected


def test_empty_checklist_is_zero_percent():
    summary = compute_progress([])
    assert summary.percentage == 0
    assert summary.all_completed is False


def test_status_for_each_stage():
    assert status_for(compute_progress([make_item(id=1)])) == OnboardingStatus.NOT_STARTED
    partial = [make_item(id=1, is_completed=True), make_item(id=2)]
    assert status_for(compute_progress(partial)) == OnboardingStatus.IN_PROGRESS
    assert status_for(compute_progress([make_item(id=1, is_completed=True)])) == OnboardingStatus.COMPLETED


# ---------------------------------------------------------------------------
# recompute
# ---------------------------------------------------------------------------


async def test_recompute_reads_rows_not_cached_progress(store):
    instance = store.seed(
        make_instance(items=[make_item(id=1, is_completed=True), make_item(id=2)], progress=0)
    )
    summary, event = await recompute(store, instance, now=NOW)
    assert summary.percentage == 50
    assert instance.progress == 50
    assert instance.status == OnboardingStatus.IN_PROGRESS
    assert event is None


async def test_recompute_at_100_stamps_activation_once(store):
    instance = store.seed(make_instance(items=[make_item(id=1, is_completed=True)]))

    summary, event = await recompute(store, instance, now=NOW)
    assert summary.percentage == 100
    assert event is not None
    assert event.employee_id == instance.employee_id
    assert instance.activated_at == NOW
    assert instance.status == OnboardingStatus.COMPLETED

    _, second = await recompute(store, instance)
    assert second is None
    assert instance.activated_at == NOW
    assert len(store.events_of("onboarding_activated")) == 1


async def test_recompute_checklist_returns_summary_and_dispatches(store, activations):
    store.seed(make_instance(id=7, items=[make_item(id=1, is_completed=True)]))
    summary = await recompute_checklist(store, 7)
    assert (summary.total_items, summary.completed_items, summary.percentage) == (1, 1, 100)
    assert [e.checklist_id for e in activations] == [7]
    assert store.tables.locked == [7]

    await recompute_checklist(store, 7)
    assert len(activations) == 1


async def test_recompute_checklist_unknown_returns_none(store):
    assert await recompute_checklist(store, 404) is None


async def test_recompute_waits_for_every_item_not_rounded_percentage(store):
    items = [make_item(id=n, is_completed=n > 1) for n in range(1, 201)]
    instance = store.seed(make_instance(items=items))

    summary, event = await recompute(store, instance, now=NOW)
    assert summary.percentage == 100
    assert summary.all_completed is False
    assert event is None
    assert instance.activated_at is None
    assert instance.status == OnboardingStatus.IN_PROGRESS
