# This project was developed with assistance from AI tools.
"""Public checklist routes -- the access token in the URL is the credential."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas.auth import DataScope
from ..schemas.checklist import (
    ChecklistItemResponse,
    ItemMutationResponse,
    ProgressResponse,
    PublicChecklistResponse,
    PublicItemUpdateRequest,
)
from ..services import completion
from ..services.checklist import get_checklist_by_token
from ..services.errors import ChecklistError
from ..services.progress import compute_progress
from ..services.store import Actor, ChecklistStore
from ._checklist_common import (
    get_public_store,
    item_not_found,
    raise_for_checklist_error,
    to_mutation_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _resolve(store: ChecklistStore, token: str):
    instance = await get_checklist_by_token(store, token)
    if instance is None:
        logger.info("Public checklist lookup with unknown token")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid onboarding link")
    return instance


@router.get("/onboarding/{token}", response_model=PublicChecklistResponse)
async def get_public_checklist(
    token: str,
    store: ChecklistStore = Depends(get_public_store),
) -> PublicChecklistResponse:
    """Checklist for the employee holding the link."""
    instance = await _resolve(store, token)
    return PublicChecklistResponse(
        employee_id=instance.employee_id,
        role=instance.role,
        department=instance.department,
        status=instance.status,
        progress=ProgressResponse.model_validate(compute_progress(instance.items)),
        items=[ChecklistItemResponse.model_validate(item) for item in instance.items],
    )


@router.put("/onboarding/{token}/items/{item_id}", response_model=ItemMutationResponse)
async def update_public_item(
    token: str,
    item_id: int,
    body: PublicItemUpdateRequest,
    store: ChecklistStore = Depends(get_public_store),
) -> ItemMutationResponse:
    """Complete an item, or attach a document without completing it."""
    instance = await _resolve(store, token)
    scoped = store.with_scope(DataScope(checklist_id=instance.id))
    actor = Actor.from_token(instance)

    try:
        if body.is_completed and body.document_url:
            result = await completion.upload_document_for_item(
                scoped, item_id, actor, body.document_url, body.document_name
            )
        elif body.is_completed:
            result = await completion.attempt_complete(scoped, item_id, actor)
        elif body.document_url:
            result = await completion.store_document(
                scoped, item_id, actor, body.document_url, body.document_name
            )
        else:
            result = await completion.toggle_item(scoped, item_id, actor, False)
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    if result is None:
        raise item_not_found()
    return to_mutation_response(result)
