# This project was developed with assistance from AI tools.
"""Checklist composition from the layered template catalog.

Layers are appended default -> role -> department and then stably sorted
by ``order``, so items sharing an order keep their layer sequence. Nothing
is deduplicated: two layers contributing order 17 yield two items.
"""

from datetime import datetime, timedelta

from db import ChecklistItem

from .templates import TemplateCatalog, TemplateItem


def collect_template_items(
    catalog: TemplateCatalog,
    role: str,
    department: str | None,
) -> list[TemplateItem]:
    """Return the layered template items in completion order."""
    layered = [
        *catalog.get_default(),
        *catalog.get_role_overlay(role),
        *catalog.get_department_overlay(department),
    ]
    # sorted() is stable; ties keep layer-append order
    return sorted(layered, key=lambda t: t.order)


def _materialize(template: TemplateItem, sequence: int, now: datetime) -> ChecklistItem:
    # Column defaults only apply at flush, so every field is set here
    return ChecklistItem(
        template_key=template.key,
        title=template.title,
        description=template.description,
        position=template.order,
        sequence=sequence,
        due_date=now + timedelta(days=template.due_offset_days),
        requires_document=template.requires_document,
        document_kind=template.document_kind,
        requires_psychometric_test=template.requires_psychometric_test,
        psychometric_test_id=template.psychometric_test_id,
        is_completed=False,
        completed_by=None,
        completed_at=None,
        document_url=None,
        document_name=None,
        document_uploaded_at=None,
        is_document_verified=False,
        verified_by=None,
        verified_at=None,
        verification_notes=None,
        psychometric_test_attempt_id=None,
        psychometric_test_completed=False,
        psychometric_test_score=None,
    )


def compose(
    catalog: TemplateCatalog,
    role: str,
    department: str | None,
    now: datetime,
) -> list[ChecklistItem]:
    """Build the unpersisted item rows for a new checklist.

    Unknown roles and departments contribute nothing. Due dates are
    ``now + due_offset_days``; every completion field starts at its default.
    """
    templates = collect_template_items(catalog, role, department)
    return [_materialize(t, seq, now) for seq, t in enumerate(templates)]
