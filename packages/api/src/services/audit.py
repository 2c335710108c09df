# This project was developed with assistance from AI tools.
"""Onboarding audit trail.

Checklist creation, item completion, uploads, assessment results, HR
verification and activation each append one ``audit_events`` row. Rows are
linked by ``prev_hash``, the SHA-256 of the row before them, so editing an
earlier row breaks the link at the next one. Appends take a transaction
scoped PostgreSQL advisory lock so two writers never link to the same tail.
"""

import hashlib
import json
import logging

from db import AuditEvent
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

GENESIS_HASH = "genesis"

# Held only while appending to the trail
AUDIT_LOCK_KEY = 900_001


def _compute_hash(event_id: int, timestamp: str, event_data: dict | None) -> str:
    payload = f"{event_id}|{timestamp}|{json.dumps(event_data, sort_keys=True, default=str)}"
    return hashlib.sha256(payload.encode()).hexdigest()


def _link_from(event: AuditEvent | None) -> str:
    """The prev_hash value for whatever row follows ``event``."""
    if event is None:
        return GENESIS_HASH
    return _compute_hash(event.id, str(event.timestamp), event.event_data)


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    user_role: str | None = None,
    checklist_id: int | None = None,
    item_id: int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Append one event to the trail, linked to the current tail.

    Runs inside the caller's transaction; the event is flushed, not
    committed, so it is discarded with the checklist change if that rolls
    back.
    """
    await session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": AUDIT_LOCK_KEY})

    tail = await session.execute(select(AuditEvent).order_by(AuditEvent.id.desc()).limit(1))

    event = AuditEvent(
        event_type=event_type,
        user_id=user_id,
        user_role=user_role,
        checklist_id=checklist_id,
        item_id=item_id,
        event_data=event_data,
        prev_hash=_link_from(tail.scalar_one_or_none()),
    )
    session.add(event)
    await session.flush()
    return event


async def verify_audit_chain(session: AsyncSession) -> dict:
    """Recompute every link in id order and report the first mismatch.

    Returns ``{"status": "OK", "events_checked": n}``, or ``"TAMPERED"``
    with ``first_break_id`` set to the row whose prev_hash no longer matches.
    """
    result = await session.execute(select(AuditEvent).order_by(AuditEvent.id.asc()))

    previous = None
    checked = 0
    for event in result.scalars().all():
        checked += 1
        if event.prev_hash != _link_from(previous):
            logger.warning("Audit chain break detected at event %s", event.id)
            return {"status": "TAMPERED", "first_break_id": event.id, "events_checked": checked}
        previous = event

    return {"status": "OK", "events_checked": checked}


async def get_events_by_checklist(
    session: AsyncSession,
    checklist_id: int,
    event_type: str | None = None,
) -> list[AuditEvent]:
    """Events recorded against one checklist, oldest first."""
    stmt = select(AuditEvent).where(AuditEvent.checklist_id == checklist_id)
    if event_type is not None:
        stmt = stmt.where(AuditEvent.event_type == event_type)
    stmt = stmt.order_by(AuditEvent.timestamp.asc(), AuditEvent.id.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())
