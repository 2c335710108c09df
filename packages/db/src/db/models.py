# This project was developed with assistance from AI tools.
"""
Onboarding domain models

Per-employee onboarding checklists, their item rows, and the
append-only audit trail.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import DocumentKind, OnboardingStatus


def _enum_values(enum_cls) -> list[str]:
    """Persist enum values (not member names) so server defaults line up."""
    return [member.value for member in enum_cls]


class ChecklistInstance(Base):
    """Onboarding checklist assigned to one employee (created once)."""

    __tablename__ = "onboarding_checklists"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, unique=True, nullable=False, index=True)
    employee_user_id = Column(String(255), nullable=True, index=True)
    role = Column(String(100), nullable=False)
    department = Column(String(100), nullable=True, index=True)
    template_version = Column(String(50), nullable=False)
    access_token = Column(String(64), unique=True, nullable=False, index=True)
    status = Column(
        Enum(OnboardingStatus, name="onboarding_status", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=OnboardingStatus.NOT_STARTED,
    )
    progress = Column(Integer, nullable=False, default=0)
    activated_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "ChecklistItem",
        back_populates="checklist",
        cascade="all, delete-orphan",
        order_by="ChecklistItem.sequence",
    )

    def __repr__(self):
        return f"<ChecklistInstance(id={self.id}, employee_id={self.employee_id})>"


class ChecklistItem(Base):
    """One template item materialized for an employee."""

    __tablename__ = "onboarding_checklist_items"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    checklist_id = Column(
        Integer, ForeignKey("onboarding_checklists.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    template_key = Column(String(100), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    sequence = Column(Integer, nullable=False, default=0)
    due_date = Column(DateTime(timezone=True), nullable=True)

    requires_document = Column(Boolean, nullable=False, default=False)
    document_kind = Column(
        Enum(DocumentKind, name="document_kind", native_enum=False, values_callable=_enum_values),
        nullable=True,
    )
    requires_psychometric_test = Column(Boolean, nullable=False, default=False)
    psychometric_test_id = Column(Integer, nullable=True)

    is_completed = Column(Boolean, nullable=False, default=False)
    completed_by = Column(String(255), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    document_url = Column(String(1000), nullable=True)
    document_name = Column(String(255), nullable=True)
    document_uploaded_at = Column(DateTime(timezone=True), nullable=True)
    is_document_verified = Column(Boolean, nullable=False, default=False)
    verified_by = Column(String(255), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    verification_notes = Column(Text, nullable=True)

    psychometric_test_attempt_id = Column(Integer, nullable=True)
    psychometric_test_completed = Column(Boolean, nullable=False, default=False)
    psychometric_test_score = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    checklist = relationship("ChecklistInstance", back_populates="items")

    def __repr__(self):
        return f"<ChecklistItem(id={self.id}, title='{self.title}', completed={self.is_completed})>"


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    user_id = Column(String(255), nullable=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    checklist_id = Column(Integer, nullable=True, index=True)
    item_id = Column(Integer, nullable=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
