# This project was developed with assistance from AI tools.
"""Service-layer exceptions for the checklist workflow.

All are ``ValueError`` subclasses so callers that only care about "bad
request from the caller's point of view" can catch one type. Routes map
each to an HTTP status; not-found is a ``None`` return, never an exception.
"""


class ChecklistError(ValueError):
    """Base class for checklist business-rule violations."""

    pass


class ChecklistExistsError(ChecklistError):
    """Raised when an employee already has a checklist instance."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} already has an onboarding checklist.")


class GatingError(ChecklistError):
    """Raised when an item cannot be completed until a precondition is met."""

    pass


class DocumentRequiredError(GatingError):
    """Raised when completing a document item with no document attached."""

    def __init__(self, item_id: int | None = None):
        self.item_id = item_id
        super().__init__("Document upload is required to complete this item.")


class AssessmentRequiredError(GatingError):
    """Raised when completing an assessment item before the test is recorded."""

    def __init__(self, item_id: int | None = None):
        self.item_id = item_id
        super().__init__("Psychometric test must be completed first.")


class InvalidTransitionError(ChecklistError):
    """Raised when a requested item state change is not allowed."""

    pass


class DocumentUploadError(ChecklistError):
    """Raised when an uploaded file is rejected (size or content type)."""

    def __init__(self, message: str, *, too_large: bool = False):
        self.too_large = too_large
        super().__init__(message)
