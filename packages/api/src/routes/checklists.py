# This project was developed with assistance from AI tools.
"""Checklist creation, lookup, progress, and overdue report routes."""

from db.enums import OnboardingStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.checklist import (
    ChecklistCreate,
    ChecklistItemResponse,
    ChecklistListResponse,
    ChecklistResponse,
    ChecklistSummary,
    OverdueItemResponse,
    OverdueListResponse,
    ProgressResponse,
)
from ..services import checklist as checklist_service
from ..services.errors import ChecklistError
from ..services.overdue import list_overdue_items
from ..services.progress import compute_progress, recompute_checklist
from ..services.store import Actor, ChecklistStore
from ._checklist_common import get_checklist_store, raise_for_checklist_error, to_checklist_response

router = APIRouter()

_HR_ROLES = (UserRole.ADMIN, UserRole.HR_ADMIN)
_OVERVIEW_ROLES = (*_HR_ROLES, UserRole.BRANCH_MANAGER, UserRole.TEAM_LEAD, UserRole.LOGISTICS_MANAGER)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Checklist not found")


@router.post(
    "",
    response_model=ChecklistResponse,
    status_code=201,
    dependencies=[Depends(require_roles(*_HR_ROLES))],
)
async def create_checklist(
    body: ChecklistCreate,
    user: CurrentUser,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ChecklistResponse:
    """Generate an employee's checklist from the template catalog."""
    try:
        instance = await checklist_service.create_checklist(
            store,
            body.employee_id,
            body.role,
            body.department,
            employee_user_id=body.employee_user_id,
            actor=Actor.from_user(user),
        )
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    return to_checklist_response(instance, include_link=True)


@router.get(
    "",
    response_model=ChecklistListResponse,
    dependencies=[Depends(require_roles(*_OVERVIEW_ROLES))],
)
async def list_checklists(
    store: ChecklistStore = Depends(get_checklist_store),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    filter_status: OnboardingStatus | None = Query(default=None, alias="status"),
) -> ChecklistListResponse:
    """List checklists visible to the caller, newest first."""
    instances, total = await checklist_service.list_checklists(
        store, offset=offset, limit=limit, status=filter_status
    )
    return ChecklistListResponse(
        data=[ChecklistSummary.model_validate(i) for i in instances],
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=offset + limit < total,
        ),
    )


@router.get(
    "/overdue",
    response_model=OverdueListResponse,
    dependencies=[Depends(require_roles(*_OVERVIEW_ROLES))],
)
async def list_overdue(
    store: ChecklistStore = Depends(get_checklist_store),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> OverdueListResponse:
    """Pending items past their due date, most overdue first."""
    report, total = await list_overdue_items(store, offset=offset, limit=limit)
    return OverdueListResponse(
        data=[
            OverdueItemResponse(
                employee_id=entry.employee_id,
                checklist_id=entry.checklist_id,
                days_overdue=entry.days_overdue,
                item=ChecklistItemResponse.model_validate(entry.item),
            )
            for entry in report
        ],
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=offset + limit < total,
        ),
    )


@router.get("/employees/{employee_id}", response_model=ChecklistResponse)
async def get_employee_checklist(
    employee_id: int,
    user: CurrentUser,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ChecklistResponse:
    """Return an employee's checklist with all items in completion order."""
    instance = await checklist_service.get_checklist(store, employee_id)
    if instance is None:
        raise _not_found()
    return to_checklist_response(instance, include_link=user.is_hr)


@router.get("/{checklist_id}/progress", response_model=ProgressResponse)
async def get_progress(
    checklist_id: int,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ProgressResponse:
    """Aggregate completion computed from the current item rows."""
    instance = await store.get_instance(checklist_id)
    if instance is None:
        raise _not_found()
    return ProgressResponse.model_validate(compute_progress(instance.items))


@router.post(
    "/{checklist_id}/progress/recompute",
    response_model=ProgressResponse,
    dependencies=[Depends(require_roles(*_HR_ROLES))],
)
async def recompute_progress(
    checklist_id: int,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ProgressResponse:
    """Recompute and persist progress; fires activation if it was missed."""
    summary = await recompute_checklist(store, checklist_id)
    if summary is None:
        raise _not_found()
    return ProgressResponse.model_validate(summary)
