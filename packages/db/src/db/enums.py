# This project was developed with assistance from AI tools.
"""
Domain enums for the employee onboarding lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    HR_ADMIN = "hr_admin"
    BRANCH_MANAGER = "branch_manager"
    TEAM_LEAD = "team_lead"
    LOGISTICS_MANAGER = "logistics_manager"
    EMPLOYEE = "employee"

    @classmethod
    def hr_roles(cls) -> frozenset["UserRole"]:
        """Roles allowed to create checklists and verify documents."""
        return frozenset({cls.ADMIN, cls.HR_ADMIN})

    @classmethod
    def manager_roles(cls) -> frozenset["UserRole"]:
        """Roles that see the checklists of their own department."""
        return frozenset({cls.BRANCH_MANAGER, cls.TEAM_LEAD, cls.LOGISTICS_MANAGER})


class DocumentKind(str, enum.Enum):
    PDF = "pdf"
    IMAGE = "image"

    def content_types(self) -> frozenset[str]:
        """MIME types accepted for uploads of this kind."""
        if self is DocumentKind.PDF:
            return frozenset({"application/pdf"})
        return frozenset({"image/jpeg", "image/png"})


class OnboardingStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
