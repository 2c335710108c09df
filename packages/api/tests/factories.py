# This project was developed with assistance from AI tools.
"""Shared test factories and an in-memory ChecklistStore double.

``FakeChecklistStore`` mirrors the query surface of
``src.services.store.ChecklistStore`` over plain dicts, applying the same
DataScope rules, so completion and lifecycle logic can be tested without
a database. Instances and items are real (transient) ORM objects.
"""

from datetime import UTC, datetime, timedelta

from db import ChecklistInstance, ChecklistItem
from db.enums import DocumentKind, OnboardingStatus

from src.services.templates import StaticTemplateCatalog, TemplateItem

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


def make_item(
    id=1,
    checklist_id=1,
    title="Complete Personal Profile",
    template_key="personal_profile",
    position=1,
    sequence=0,
    due_date=None,
    requires_document=False,
    document_kind=None,
    requires_psychometric_test=False,
    psychometric_test_id=None,
    is_completed=False,
    document_url=None,
    psychometric_test_completed=False,
):
    """Create a transient ChecklistItem with every column set explicitly."""
    return ChecklistItem(
        id=id,
        checklist_id=checklist_id,
        template_key=template_key,
        title=title,
        description=None,
        position=position,
        sequence=sequence,
        due_date=due_date or NOW + timedelta(days=3),
        requires_document=requires_document,
        document_kind=document_kind,
        requires_psychometric_test=requires_psychometric_test,
        psychometric_test_id=psychometric_test_id,
        is_completed=is_completed,
        completed_by=None,
        completed_at=NOW if is_completed else None,
        document_url=document_url,
        document_name=document_url.rsplit("/", 1)[-1] if document_url else None,
        document_uploaded_at=None,
        is_document_verified=False,
        verified_by=None,
        verified_at=None,
        verification_notes=None,
        psychometric_test_attempt_id=None,
        psychometric_test_completed=psychometric_test_completed,
        psychometric_test_score=None,
    )


def make_instance(
    id=1,
    employee_id=1001,
    employee_user_id="alex-rivera-001",
    role="employee",
    department=None,
    items=None,
    progress=0,
    activated_at=None,
    access_token="tok-alex",
):
    instance = ChecklistInstance(
        id=id,
        employee_id=employee_id,
        employee_user_id=employee_user_id,
        role=role,
        department=department,
        template_version="test",
        access_token=access_token,
        status=OnboardingStatus.NOT_STARTED,
        progress=progress,
        activated_at=activated_at,
        created_by="hr-admin-001",
    )
    instance.items = list(items or [])
    for item in instance.items:
        item.checklist_id = id
    return instance


def two_item_catalog() -> StaticTemplateCatalog:
    """Tiny catalog: one plain item and one document item."""
    return StaticTemplateCatalog(
        default=(
            TemplateItem(key="a", title="Plain task", description="", order=1, due_offset_days=1),
            TemplateItem(
                key="b",
                title="Upload contract",
                description="",
                order=2,
                due_offset_days=2,
                requires_document=True,
                document_kind=DocumentKind.PDF,
            ),
        ),
        roles={},
        departments={},
        version="test-2",
    )


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class _Tables:
    """Shared backing state for every scoped view of one fake store."""

    def __init__(self):
        self.instances: dict[int, ChecklistInstance] = {}
        self.items: dict[int, ChecklistItem] = {}
        self.audit_events: list[dict] = []
        self.locked: list[int] = []
        self.commits = 0
        self.rollbacks = 0
        self._next_instance_id = 1
        self._next_item_id = 1

    def next_instance_id(self) -> int:
        value = self._next_instance_id
        self._next_instance_id += 1
        return value

    def next_item_id(self) -> int:
        value = self._next_item_id
        self._next_item_id += 1
        return value


class FakeChecklistStore:
    """Dict-backed stand-in for ChecklistStore with identical scope rules."""

    def __init__(self, scope=None, *, tables: _Tables | None = None):
        self.scope = scope
        self.tables = tables or _Tables()

    def with_scope(self, scope) -> "FakeChecklistStore":
        return FakeChecklistStore(scope, tables=self.tables)

    # -- seeding helpers --

    def seed(self, instance: ChecklistInstance) -> ChecklistInstance:
        if instance.id is None:
            instance.id = self.tables.next_instance_id()
        self.tables.instances[instance.id] = instance
        for item in instance.items:
            if item.id is None:
                item.id = self.tables.next_item_id()
            item.checklist_id = instance.id
            self.tables.items[item.id] = item
        return instance

    @property
    def audit_events(self) -> list[dict]:
        return self.tables.audit_events

    def events_of(self, event_type: str) -> list[dict]:
        return [e for e in self.tables.audit_events if e["event_type"] == event_type]

    # -- scope --

    def _visible(self, instance: ChecklistInstance) -> bool:
        scope = self.scope
        if scope is None or scope.full_access:
            return True
        if scope.checklist_id is not None:
            return instance.id == scope.checklist_id
        if scope.own_data_only:
            return instance.employee_user_id == scope.user_id
        if scope.department:
            return instance.department == scope.department
        return False

    def _visible_instances(self) -> list[ChecklistInstance]:
        return [i for i in self.tables.instances.values() if self._visible(i)]

    # -- instances --

    async def get_instance(self, checklist_id):
        instance = self.tables.instances.get(checklist_id)
        return instance if instance is not None and self._visible(instance) else None

    async def get_by_employee(self, employee_id):
        return next((i for i in self._visible_instances() if i.employee_id == employee_id), None)

    async def get_by_token(self, access_token):
        return next((i for i in self._visible_instances() if i.access_token == access_token), None)

    async def employee_has_checklist(self, employee_id):
        return any(i.employee_id == employee_id for i in self.tables.instances.values())

    async def lock_instance(self, checklist_id):
        self.tables.locked.append(checklist_id)
        return self.tables.instances.get(checklist_id)

    async def list_instances(self, *, offset=0, limit=20, status=None):
        rows = [i for i in self._visible_instances() if status is None or i.status == status]
        rows.sort(key=lambda i: i.id, reverse=True)
        return rows[offset : offset + limit]

    async def count_instances(self, *, status=None):
        return len([i for i in self._visible_instances() if status is None or i.status == status])

    async def add_instance(self, instance, items):
        instance.items = list(items)
        return self.seed(instance)

    # -- items --

    async def get_item(self, item_id, *, lock=False):
        item = self.tables.items.get(item_id)
        if item is None:
            return None
        instance = self.tables.instances.get(item.checklist_id)
        return item if instance is not None and self._visible(instance) else None

    async def list_items(self, checklist_id):
        rows = [i for i in self.tables.items.values() if i.checklist_id == checklist_id]
        return sorted(rows, key=lambda i: i.sequence)

    def _overdue(self, now):
        visible = {i.id for i in self._visible_instances()}
        return sorted(
            (
                item
                for item in self.tables.items.values()
                if item.checklist_id in visible
                and not item.is_completed
                and item.due_date is not None
                and item.due_date < now
            ),
            key=lambda i: (i.due_date, i.id),
        )

    async def list_overdue_items(self, now, *, offset=0, limit=50):
        return self._overdue(now)[offset : offset + limit]

    async def count_overdue_items(self, now):
        return len(self._overdue(now))

    # -- unit of work --

    async def audit(self, event_type, *, actor=None, checklist_id=None, item_id=None, event_data=None):
        self.tables.audit_events.append(
            {
                "event_type": event_type,
                "user_id": actor.user_id if actor else None,
                "checklist_id": checklist_id,
                "item_id": item_id,
                "event_data": event_data,
            }
        )

    async def flush(self):
        return None

    async def commit(self):
        self.tables.commits += 1

    async def rollback(self):
        self.tables.rollbacks += 1
