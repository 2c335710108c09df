# This project was developed with assistance from AI tools.
"""Checklist lifecycle: create once per employee, then read.

Every read goes through the caller's ChecklistStore scope, so employees
see only their own checklist and department managers only their
department. Out-of-scope reads return None, same as missing rows.
"""

import logging
import secrets
from datetime import UTC, datetime

from db import ChecklistInstance
from db.enums import OnboardingStatus
from sqlalchemy.exc import IntegrityError

from .composer import compose
from .errors import ChecklistExistsError
from .store import Actor, ChecklistStore
from .templates import TemplateCatalog, get_template_catalog

logger = logging.getLogger(__name__)


def generate_access_token() -> str:
    """URL-safe token for the public checklist link."""
    return secrets.token_urlsafe(32)


async def create_checklist(
    store: ChecklistStore,
    employee_id: int,
    role: str,
    department: str | None = None,
    *,
    employee_user_id: str | None = None,
    actor: Actor | None = None,
    catalog: TemplateCatalog | None = None,
    now: datetime | None = None,
) -> ChecklistInstance:
    """Compose and persist an employee's checklist with all its items.

    Raises:
        ChecklistExistsError: the employee already has a checklist. The
            existing instance and its items are left untouched.
    """
    if await store.employee_has_checklist(employee_id):
        raise ChecklistExistsError(employee_id)

    catalog = catalog or get_template_catalog()
    now = now or datetime.now(UTC)
    items = compose(catalog, role, department, now)

    instance = ChecklistInstance(
        employee_id=employee_id,
        employee_user_id=employee_user_id,
        role=role,
        department=department,
        template_version=catalog.version,
        access_token=generate_access_token(),
        status=OnboardingStatus.NOT_STARTED,
        progress=0,
        activated_at=None,
        created_by=actor.user_id if actor else None,
    )

    try:
        await store.add_instance(instance, items)
        await store.audit(
            "checklist_created",
            actor=actor,
            checklist_id=instance.id,
            event_data={
                "employee_id": employee_id,
                "role": role,
                "department": department,
                "template_version": catalog.version,
                "item_count": len(items),
            },
        )
        await store.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent create for the same employee
        await store.rollback()
        raise ChecklistExistsError(employee_id) from exc

    logger.info(
        "Created onboarding checklist %s for employee %s (%d items, role=%s, department=%s)",
        instance.id,
        employee_id,
        len(items),
        role,
        department,
    )
    return instance


async def get_checklist(store: ChecklistStore, employee_id: int) -> ChecklistInstance | None:
    """Return the employee's checklist, or None if absent or out of scope."""
    return await store.get_by_employee(employee_id)


async def get_checklist_by_token(store: ChecklistStore, access_token: str) -> ChecklistInstance | None:
    """Resolve a public checklist link."""
    if not access_token:
        return None
    return await store.get_by_token(access_token)


async def list_checklists(
    store: ChecklistStore,
    *,
    offset: int = 0,
    limit: int = 20,
    status: OnboardingStatus | None = None,
) -> tuple[list[ChecklistInstance], int]:
    """Return visible checklists, newest first, with the unpaginated total."""
    total = await store.count_instances(status=status)
    instances = await store.list_instances(offset=offset, limit=limit, status=status)
    return instances, total
