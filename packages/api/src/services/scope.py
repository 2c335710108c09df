# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that every checklist query
applies the same rules. The join_to_checklist parameter handles item
queries, which must join through to the parent checklist.
"""

from db import ChecklistInstance

from ..schemas.auth import DataScope


def apply_data_scope(stmt, scope: DataScope | None, *, join_to_checklist=None):
    """Apply data scope filtering to a SQLAlchemy query.

    Args:
        stmt: A SQLAlchemy select statement.
        scope: The caller's DataScope. ``None`` means an internal caller
            with unrestricted visibility.
        join_to_checklist: ORM relationship attribute to join to reach
            ChecklistInstance (e.g., ``ChecklistItem.checklist``). Pass
            ``None`` when querying ChecklistInstance directly.

    Returns:
        The filtered statement.
    """
    if scope is None or scope.full_access:
        return stmt

    if join_to_checklist is not None:
        stmt = stmt.join(join_to_checklist)

    if scope.checklist_id is not None:
        # Public token link: exactly one checklist
        return stmt.where(ChecklistInstance.id == scope.checklist_id)
    if scope.own_data_only:
        return stmt.where(ChecklistInstance.employee_user_id == scope.user_id)
    if scope.department:
        return stmt.where(ChecklistInstance.department == scope.department)
    # No recognised grant -- match nothing rather than everything
    return stmt.where(ChecklistInstance.id.is_(None))
