# This project was developed with assistance from AI tools.
"""HR audit trail query and chain verification endpoints."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.audit import AuditByChecklistResponse, AuditChainVerifyResponse, AuditEventItem
from ..services.audit import get_events_by_checklist, verify_audit_chain

router = APIRouter()

_AUDIT_ROLES = (UserRole.ADMIN, UserRole.HR_ADMIN)


def _to_item(evt) -> AuditEventItem:
    return AuditEventItem(
        id=evt.id,
        timestamp=evt.timestamp,
        event_type=evt.event_type,
        user_id=evt.user_id,
        user_role=evt.user_role,
        checklist_id=evt.checklist_id,
        item_id=evt.item_id,
        event_data=evt.event_data,
    )


@router.get(
    "/checklists/{checklist_id}",
    response_model=AuditByChecklistResponse,
    dependencies=[Depends(require_roles(*_AUDIT_ROLES))],
)
async def audit_by_checklist(
    checklist_id: int,
    event_type: str | None = Query(default=None, max_length=100),
    session: AsyncSession = Depends(get_db),
) -> AuditByChecklistResponse:
    """Audit trail for one checklist, oldest first, optionally one event type."""
    events = await get_events_by_checklist(session, checklist_id, event_type)
    return AuditByChecklistResponse(
        checklist_id=checklist_id,
        count=len(events),
        events=[_to_item(e) for e in events],
    )


@router.get(
    "/verify",
    response_model=AuditChainVerifyResponse,
    dependencies=[Depends(require_roles(*_AUDIT_ROLES))],
)
async def audit_verify(
    session: AsyncSession = Depends(get_db),
) -> AuditChainVerifyResponse:
    """Walk the hash chain and report the first break, if any."""
    return AuditChainVerifyResponse(**await verify_audit_chain(session))
