# This project was developed with assistance from AI tools.
"""Persistence boundary for checklist instances and their items.

``ChecklistStore`` wraps one ``AsyncSession`` and the caller's DataScope.
It owns queries and row locking only; business rules live in the
completion engine and the progress aggregator.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from db import ChecklistInstance, ChecklistItem
from db.enums import OnboardingStatus
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..schemas.auth import DataScope, UserContext
from .audit import write_audit_event
from .scope import apply_data_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Who performed a mutation, as recorded on items and audit events."""

    user_id: str
    role: str

    @classmethod
    def from_user(cls, user: UserContext) -> "Actor":
        return cls(user_id=user.user_id, role=user.role.value)

    @classmethod
    def from_token(cls, instance: ChecklistInstance) -> "Actor":
        """Actor for the public checklist link (the employee themselves)."""
        return cls(
            user_id=instance.employee_user_id or f"employee:{instance.employee_id}",
            role="employee",
        )


class ChecklistStore:
    """Scoped data access for onboarding checklists."""

    def __init__(self, session: AsyncSession, scope: DataScope | None = None):
        self.session = session
        self.scope = scope

    def with_scope(self, scope: DataScope) -> "ChecklistStore":
        """Same session, narrower visibility."""
        return type(self)(self.session, scope)

    # -- Instances ----------------------------------------------------------

    def _instance_query(self):
        stmt = select(ChecklistInstance).options(selectinload(ChecklistInstance.items))
        return apply_data_scope(stmt, self.scope)

    async def get_instance(self, checklist_id: int) -> ChecklistInstance | None:
        stmt = self._instance_query().where(ChecklistInstance.id == checklist_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_employee(self, employee_id: int) -> ChecklistInstance | None:
        stmt = self._instance_query().where(ChecklistInstance.employee_id == employee_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, access_token: str) -> ChecklistInstance | None:
        stmt = self._instance_query().where(ChecklistInstance.access_token == access_token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def employee_has_checklist(self, employee_id: int) -> bool:
        """Unscoped existence check used before creating a checklist."""
        stmt = select(func.count(ChecklistInstance.id)).where(
            ChecklistInstance.employee_id == employee_id
        )
        return ((await self.session.execute(stmt)).scalar() or 0) > 0

    async def lock_instance(self, checklist_id: int) -> ChecklistInstance | None:
        """SELECT ... FOR UPDATE on the parent row; held until commit/rollback."""
        stmt = (
            select(ChecklistInstance)
            .where(ChecklistInstance.id == checklist_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_instances(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        status: OnboardingStatus | None = None,
    ) -> list[ChecklistInstance]:
        stmt = self._instance_query()
        if status is not None:
            stmt = stmt.where(ChecklistInstance.status == status)
        stmt = stmt.order_by(ChecklistInstance.created_at.desc(), ChecklistInstance.id.desc())
        stmt = stmt.offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_instances(self, *, status: OnboardingStatus | None = None) -> int:
        stmt = apply_data_scope(select(func.count(ChecklistInstance.id)), self.scope)
        if status is not None:
            stmt = stmt.where(ChecklistInstance.status == status)
        return (await self.session.execute(stmt)).scalar() or 0

    async def add_instance(
        self,
        instance: ChecklistInstance,
        items: list[ChecklistItem],
    ) -> ChecklistInstance:
        """Stage a new instance with its item rows and flush to assign ids."""
        instance.items = list(items)
        self.session.add(instance)
        await self.session.flush()
        return instance

    # -- Items --------------------------------------------------------------

    async def get_item(self, item_id: int, *, lock: bool = False) -> ChecklistItem | None:
        """Return one item visible to the scope; ``lock`` re-reads it FOR UPDATE."""
        stmt = select(ChecklistItem).where(ChecklistItem.id == item_id)
        stmt = apply_data_scope(stmt, self.scope, join_to_checklist=ChecklistItem.checklist)
        if lock:
            stmt = stmt.with_for_update(of=ChecklistItem).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_items(self, checklist_id: int) -> list[ChecklistItem]:
        """Fresh read of an instance's item rows (flushed state)."""
        stmt = (
            select(ChecklistItem)
            .where(ChecklistItem.checklist_id == checklist_id)
            .order_by(ChecklistItem.sequence)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    def _overdue_query(self, stmt, now: datetime):
        stmt = apply_data_scope(stmt, self.scope, join_to_checklist=ChecklistItem.checklist)
        return stmt.where(
            ChecklistItem.is_completed.is_(False),
            ChecklistItem.due_date.is_not(None),
            ChecklistItem.due_date < now,
        )

    async def list_overdue_items(
        self,
        now: datetime,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ChecklistItem]:
        stmt = select(ChecklistItem).options(selectinload(ChecklistItem.checklist))
        stmt = self._overdue_query(stmt, now)
        stmt = stmt.order_by(ChecklistItem.due_date.asc(), ChecklistItem.id.asc())
        stmt = stmt.offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_overdue_items(self, now: datetime) -> int:
        stmt = self._overdue_query(select(func.count(ChecklistItem.id)), now)
        return (await self.session.execute(stmt)).scalar() or 0

    # -- Unit of work -------------------------------------------------------

    async def audit(
        self,
        event_type: str,
        *,
        actor: Actor | None = None,
        checklist_id: int | None = None,
        item_id: int | None = None,
        event_data: dict | None = None,
    ) -> None:
        await write_audit_event(
            self.session,
            event_type=event_type,
            user_id=actor.user_id if actor else None,
            user_role=actor.role if actor else None,
            checklist_id=checklist_id,
            item_id=item_id,
            event_data=event_data,
        )

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
