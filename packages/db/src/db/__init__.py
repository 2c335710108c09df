# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import DocumentKind, OnboardingStatus, UserRole
from .models import AuditEvent, ChecklistInstance, ChecklistItem

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "DocumentKind",
    "OnboardingStatus",
    "UserRole",
    # Models
    "AuditEvent",
    "ChecklistInstance",
    "ChecklistItem",
]
