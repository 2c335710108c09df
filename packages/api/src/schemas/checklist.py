# This project was developed with assistance from AI tools.
"""Onboarding checklist request/response schemas."""

from datetime import datetime

from db.enums import DocumentKind, OnboardingStatus
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class ChecklistItemResponse(BaseModel):
    """One checklist item with its completion, document, and assessment state."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    checklist_id: int
    template_key: str
    title: str
    description: str | None = None
    position: int
    sequence: int
    due_date: datetime | None = None

    requires_document: bool
    document_kind: DocumentKind | None = None
    requires_psychometric_test: bool
    psychometric_test_id: int | None = None

    is_completed: bool
    completed_by: str | None = None
    completed_at: datetime | None = None

    document_url: str | None = None
    document_name: str | None = None
    document_uploaded_at: datetime | None = None
    is_document_verified: bool = False
    verified_by: str | None = None
    verified_at: datetime | None = None
    verification_notes: str | None = None

    psychometric_test_attempt_id: int | None = None
    psychometric_test_completed: bool = False
    psychometric_test_score: float | None = None


class ProgressResponse(BaseModel):
    """Aggregate completion for one checklist."""

    model_config = ConfigDict(from_attributes=True)

    total_items: int
    completed_items: int
    percentage: int


class ChecklistSummary(BaseModel):
    """Checklist header without items (list views)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    employee_user_id: str | None = None
    role: str
    department: str | None = None
    template_version: str
    status: OnboardingStatus
    progress: int
    activated_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class ChecklistResponse(ChecklistSummary):
    """Full checklist with ordered items."""

    items: list[ChecklistItemResponse] = Field(default_factory=list)
    public_url: str | None = Field(
        default=None,
        description="Tokenized link to the public checklist page (HR callers only).",
    )


class ChecklistListResponse(BaseModel):
    """Paginated list of checklists."""

    data: list[ChecklistSummary]
    pagination: Pagination


class ChecklistCreate(BaseModel):
    """Request to generate an employee's checklist."""

    employee_id: int = Field(gt=0)
    role: str = Field(min_length=1, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    employee_user_id: str | None = Field(
        default=None,
        description="Identity-provider subject of the employee, for self-service access.",
    )


class ItemToggleRequest(BaseModel):
    is_completed: bool


class AssessmentResultRequest(BaseModel):
    """Outcome of a psychometric test attempt."""

    attempt_id: int = Field(gt=0)
    score: float = Field(ge=0, le=100)


class VerifyDocumentRequest(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)


class ItemMutationResponse(BaseModel):
    """Result of any item mutation."""

    item: ChecklistItemResponse
    message: str
    all_completed: bool
    progress: ProgressResponse


class DocumentLinkResponse(BaseModel):
    """Presigned download link for an item's document."""

    url: str
    expires_in: int


class OverdueItemResponse(BaseModel):
    """A pending item past its due date."""

    employee_id: int
    checklist_id: int
    days_overdue: int
    item: ChecklistItemResponse


class OverdueListResponse(BaseModel):
    data: list[OverdueItemResponse]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Public (token link) schemas
# ---------------------------------------------------------------------------


class PublicChecklistResponse(BaseModel):
    """Checklist as shown on the public onboarding page."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    role: str
    department: str | None = None
    status: OnboardingStatus
    progress: ProgressResponse
    items: list[ChecklistItemResponse]


class PublicItemUpdateRequest(BaseModel):
    """Update sent from the public checklist page."""

    is_completed: bool
    document_url: str | None = Field(default=None, max_length=1000)
    document_name: str | None = Field(default=None, max_length=255)
