# This project was developed with assistance from AI tools.
"""Dependencies and response helpers shared by the checklist routers."""

from typing import NoReturn

from db import ChecklistInstance, get_db
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..middleware.auth import CurrentUser
from ..schemas.checklist import (
    ChecklistItemResponse,
    ChecklistResponse,
    ItemMutationResponse,
    ProgressResponse,
)
from ..services.completion import ItemMutationResult
from ..services.errors import (
    ChecklistError,
    ChecklistExistsError,
    DocumentUploadError,
    InvalidTransitionError,
)
from ..services.store import ChecklistStore


async def get_checklist_store(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ChecklistStore:
    """Store bound to the caller's data scope."""
    return ChecklistStore(session, user.data_scope)


async def get_public_store(session: AsyncSession = Depends(get_db)) -> ChecklistStore:
    """Unscoped store; public routes narrow it once the token is resolved."""
    return ChecklistStore(session)


def raise_for_checklist_error(exc: ChecklistError) -> NoReturn:
    """Translate a service-layer rule violation into an HTTPException."""
    if isinstance(exc, (ChecklistExistsError, InvalidTransitionError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, DocumentUploadError) and exc.too_large:
        code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    else:
        # Gating failures and other rule violations
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    raise HTTPException(status_code=code, detail=str(exc)) from exc


def item_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Checklist item not found")


def to_mutation_response(result: ItemMutationResult) -> ItemMutationResponse:
    return ItemMutationResponse(
        item=ChecklistItemResponse.model_validate(result.item),
        message=result.message,
        all_completed=result.all_completed,
        progress=ProgressResponse.model_validate(result.progress),
    )


def build_public_url(instance: ChecklistInstance) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/onboarding/{instance.access_token}"


def to_checklist_response(instance: ChecklistInstance, *, include_link: bool = False) -> ChecklistResponse:
    response = ChecklistResponse.model_validate(instance)
    if include_link:
        response.public_url = build_public_url(instance)
    return response
