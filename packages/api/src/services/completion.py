# This project was developed with assistance from AI tools.
"""Checklist item completion engine.

Items move Pending -> Completed and never back. Completion is gated:
document items need a stored document, assessment items need a recorded
psychometric result. Every operation runs as one transaction that locks
the parent checklist row, re-reads the item under that lock, applies the
change, recomputes progress, and commits. Activation listeners are only
called after the commit succeeds.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from db import ChecklistInstance, ChecklistItem
from db.enums import OnboardingStatus

from .activation import ActivationEvent, dispatch_activation
from .errors import (
    AssessmentRequiredError,
    ChecklistError,
    DocumentRequiredError,
    InvalidTransitionError,
)
from .progress import ProgressSummary, recompute
from .storage import StorageService, validate_upload
from .store import Actor, ChecklistStore

logger = logging.getLogger(__name__)

MSG_COMPLETED = "Checklist item completed."
MSG_ALREADY_COMPLETED = "Checklist item was already completed."
MSG_STILL_PENDING = "Checklist item is still pending."
MSG_DOCUMENT_STORED = "Document uploaded."
MSG_ASSESSMENT_RECORDED = "Assessment result recorded. Mark the item complete to finish it."
MSG_VERIFIED = "Document verified."
MSG_ALL_COMPLETED = "All onboarding tasks completed! Your account has been activated."


@dataclass
class ItemMutationResult:
    item: ChecklistItem
    progress: ProgressSummary
    message: str
    all_completed: bool
    activated: ActivationEvent | None = None


Mutation = Callable[[ChecklistInstance, ChecklistItem, datetime], Awaitable[str]]


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def is_retired(instance: ChecklistInstance) -> bool:
    """A fully completed checklist is read-only for employee mutations."""
    return instance.activated_at is not None or instance.status == OnboardingStatus.COMPLETED


def check_gates(item: ChecklistItem, document_url: str | None = None) -> None:
    """Raise the first unmet completion precondition, if any."""
    if item.requires_document and not (document_url or item.document_url):
        raise DocumentRequiredError(item.id)
    if item.requires_psychometric_test and not item.psychometric_test_completed:
        raise AssessmentRequiredError(item.id)


def _attach_document(item: ChecklistItem, url: str, name: str | None, now: datetime) -> None:
    item.document_url = url
    item.document_name = name or url.rsplit("/", 1)[-1]
    item.document_uploaded_at = now
    # Replacing the file voids any earlier HR verification
    item.is_document_verified = False
    item.verified_by = None
    item.verified_at = None
    item.verification_notes = None


def _check_document_target(instance: ChecklistInstance, item: ChecklistItem) -> None:
    if not item.requires_document:
        raise InvalidTransitionError("This checklist item does not accept a document.")
    if is_retired(instance):
        raise InvalidTransitionError("Onboarding checklist is already complete.")


# ---------------------------------------------------------------------------
# Transaction wrapper
# ---------------------------------------------------------------------------


async def _mutate(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    mutation: Mutation,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Lock, re-read, mutate, recompute, commit, then signal activation.

    Returns None if the item is not visible to the store's scope.
    """
    item = await store.get_item(item_id)
    if item is None:
        return None

    now = now or datetime.now(UTC)
    try:
        instance = await store.lock_instance(item.checklist_id)
        item = await store.get_item(item_id, lock=True)
        message = await mutation(instance, item, now)
        summary, event = await recompute(store, instance, actor=actor, now=now)
        await store.commit()
    except ChecklistError:
        await store.rollback()
        raise

    if event is not None:
        message = MSG_ALL_COMPLETED
        await dispatch_activation(event)

    return ItemMutationResult(
        item=item,
        progress=summary,
        message=message,
        all_completed=summary.all_completed,
        activated=event,
    )


async def _complete(
    store: ChecklistStore,
    instance: ChecklistInstance,
    item: ChecklistItem,
    actor: Actor | None,
    now: datetime,
    document_url: str | None = None,
    document_name: str | None = None,
) -> str:
    if item.is_completed:
        return MSG_ALREADY_COMPLETED

    if document_url and not item.requires_document:
        raise InvalidTransitionError("This checklist item does not accept a document.")
    check_gates(item, document_url)
    if document_url:
        _attach_document(item, document_url, document_name, now)

    item.is_completed = True
    item.completed_at = now
    item.completed_by = actor.user_id if actor else None
    await store.audit(
        "item_completed",
        actor=actor,
        checklist_id=instance.id,
        item_id=item.id,
        event_data={"template_key": item.template_key, "title": item.title},
    )
    return MSG_COMPLETED


async def _store_document(
    store: ChecklistStore,
    instance: ChecklistInstance,
    item: ChecklistItem,
    actor: Actor | None,
    now: datetime,
    document_url: str,
    document_name: str | None,
) -> str:
    _check_document_target(instance, item)
    _attach_document(item, document_url, document_name, now)
    await store.audit(
        "document_uploaded",
        actor=actor,
        checklist_id=instance.id,
        item_id=item.id,
        event_data={"document_name": item.document_name},
    )
    return MSG_DOCUMENT_STORED


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def attempt_complete(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    document_url: str | None = None,
    document_name: str | None = None,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Complete an item if its gates are satisfied.

    Completing an already completed item is a successful no-op that leaves
    ``completed_at`` untouched. A document supplied here is stored with the
    completion; only document items accept one.

    Raises:
        DocumentRequiredError: document item with no document stored or supplied.
        AssessmentRequiredError: assessment item whose test is not recorded.
        InvalidTransitionError: document supplied for an item that takes none.
    """

    async def mutation(instance, item, ts):
        return await _complete(store, instance, item, actor, ts, document_url, document_name)

    return await _mutate(store, item_id, actor, mutation, now)


async def store_document(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    document_url: str,
    document_name: str | None = None,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Attach a document reference without completing the item."""

    async def mutation(instance, item, ts):
        return await _store_document(store, instance, item, actor, ts, document_url, document_name)

    return await _mutate(store, item_id, actor, mutation, now)


async def upload_document_for_item(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    document_url: str,
    document_name: str | None = None,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Store a document and then try to complete the item, in one transaction.

    Assessment items that also need a document stay pending after the
    upload; the AssessmentRequiredError from the completion attempt is not
    an error here.
    """

    async def mutation(instance, item, ts):
        await _store_document(store, instance, item, actor, ts, document_url, document_name)
        try:
            return await _complete(store, instance, item, actor, ts)
        except AssessmentRequiredError:
            return MSG_DOCUMENT_STORED

    return await _mutate(store, item_id, actor, mutation, now)


async def toggle_item(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    is_completed: bool,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Set the completion flag from a checkbox-style request.

    ``True`` goes through :func:`attempt_complete`. ``False`` on a pending
    item is a no-op; on a completed item it is refused, because completion
    is terminal.
    """
    if is_completed:
        return await attempt_complete(store, item_id, actor, now=now)

    async def mutation(instance, item, ts):
        if item.is_completed:
            raise InvalidTransitionError("Completed checklist items cannot be reopened.")
        return MSG_STILL_PENDING

    return await _mutate(store, item_id, actor, mutation, now)


async def record_psychometric_result(
    store: ChecklistStore,
    item_id: int,
    actor: Actor | None,
    attempt_id: int,
    score: float,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Record the assessment outcome; the item itself stays pending."""
    if not 0 <= score <= 100:
        raise ChecklistError("Assessment score must be between 0 and 100.")

    async def mutation(instance, item, ts):
        if not item.requires_psychometric_test:
            raise InvalidTransitionError("This checklist item has no assessment.")
        if item.is_completed or is_retired(instance):
            raise InvalidTransitionError("Checklist item is already completed.")
        item.psychometric_test_attempt_id = attempt_id
        item.psychometric_test_score = score
        item.psychometric_test_completed = True
        await store.audit(
            "assessment_recorded",
            actor=actor,
            checklist_id=instance.id,
            item_id=item.id,
            event_data={
                "psychometric_test_id": item.psychometric_test_id,
                "attempt_id": attempt_id,
                "score": score,
            },
        )
        return MSG_ASSESSMENT_RECORDED

    return await _mutate(store, item_id, actor, mutation, now)


async def verify_document(
    store: ChecklistStore,
    item_id: int,
    verifier: Actor,
    notes: str | None = None,
    *,
    now: datetime | None = None,
) -> ItemMutationResult | None:
    """Mark an item's document as verified by HR. Never changes completion."""

    async def mutation(instance, item, ts):
        if not item.requires_document:
            raise InvalidTransitionError("This checklist item does not accept a document.")
        if not item.document_url:
            raise InvalidTransitionError("No document has been uploaded for this item.")
        item.is_document_verified = True
        item.verified_by = verifier.user_id
        item.verified_at = ts
        item.verification_notes = notes
        await store.audit(
            "document_verified",
            actor=verifier,
            checklist_id=instance.id,
            item_id=item.id,
            event_data={"notes": notes},
        )
        return MSG_VERIFIED

    return await _mutate(store, item_id, verifier, mutation, now)


async def upload_item_file(
    store: ChecklistStore,
    storage: StorageService,
    item_id: int,
    actor: Actor | None,
    *,
    filename: str,
    content_type: str,
    file_data: bytes,
    max_size_mb: int,
) -> ItemMutationResult | None:
    """Validate and store an uploaded file, then run the upload transition.

    The object is removed again if the checklist update is rejected.
    """
    item = await store.get_item(item_id)
    if item is None:
        return None
    if not item.requires_document:
        raise InvalidTransitionError("This checklist item does not accept a document.")
    validate_upload(item.document_kind, content_type, len(file_data), max_size_mb)

    instance = await store.get_instance(item.checklist_id)
    if instance is None:
        return None

    object_key = storage.build_object_key(instance.employee_id, item.id, filename)
    await storage.upload_file(file_data, object_key, content_type)
    try:
        return await upload_document_for_item(
            store, item_id, actor, document_url=object_key, document_name=filename
        )
    except ChecklistError:
        logger.info("Discarding upload %s after rejected checklist update", object_key)
        await storage.delete_file(object_key)
        raise
