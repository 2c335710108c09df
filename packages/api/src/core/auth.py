# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

Kept apart from ``middleware/auth.py`` so services and tests can build
scopes without pulling in FastAPI/Starlette.
"""

from db.enums import UserRole

from ..schemas.auth import DataScope


def build_data_scope(role: UserRole, user_id: str, department: str | None = None) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role in UserRole.hr_roles():
        return DataScope(full_access=True)
    if role in UserRole.manager_roles():
        if department:
            return DataScope(department=department)
        # Manager without a department claim sees only their own checklist
        return DataScope(own_data_only=True, user_id=user_id)
    return DataScope(own_data_only=True, user_id=user_id)
