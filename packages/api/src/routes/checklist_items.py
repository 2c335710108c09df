# This project was developed with assistance from AI tools.
"""Checklist item mutation routes: toggle, document upload, assessment, verify."""

from db.enums import UserRole
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ..core.config import settings
from ..middleware.auth import CurrentUser, require_roles
from ..schemas.checklist import (
    AssessmentResultRequest,
    DocumentLinkResponse,
    ItemMutationResponse,
    ItemToggleRequest,
    VerifyDocumentRequest,
)
from ..services import completion
from ..services.errors import ChecklistError
from ..services.storage import get_storage_service
from ..services.store import Actor, ChecklistStore
from ._checklist_common import (
    get_checklist_store,
    item_not_found,
    raise_for_checklist_error,
    to_mutation_response,
)

router = APIRouter()

_DOWNLOAD_URL_TTL = 900


async def _read_upload(file: UploadFile, max_size_mb: int) -> bytes:
    """Read at most one byte past the size limit; validation rejects the overflow."""
    return await file.read(max_size_mb * 1024 * 1024 + 1)


@router.patch("/{item_id}", response_model=ItemMutationResponse)
async def toggle_item(
    item_id: int,
    body: ItemToggleRequest,
    user: CurrentUser,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ItemMutationResponse:
    """Mark an item complete. Completed items cannot be unchecked."""
    try:
        result = await completion.toggle_item(
            store, item_id, Actor.from_user(user), body.is_completed
        )
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    if result is None:
        raise item_not_found()
    return to_mutation_response(result)


@router.post("/{item_id}/document", response_model=ItemMutationResponse)
async def upload_document(
    item_id: int,
    user: CurrentUser,
    file: UploadFile | None = File(default=None),
    document_url: str | None = Form(default=None, max_length=1000),
    document_name: str | None = Form(default=None, max_length=255),
    store: ChecklistStore = Depends(get_checklist_store),
) -> ItemMutationResponse:
    """Attach a document and complete the item if nothing else gates it.

    Accepts either a multipart file (stored in S3) or a reference to a
    document that already lives elsewhere.
    """
    actor = Actor.from_user(user)
    try:
        if file is not None:
            result = await completion.upload_item_file(
                store,
                get_storage_service(),
                item_id,
                actor,
                filename=file.filename or "document",
                content_type=file.content_type or "",
                file_data=await _read_upload(file, settings.UPLOAD_MAX_SIZE_MB),
                max_size_mb=settings.UPLOAD_MAX_SIZE_MB,
            )
        elif document_url:
            result = await completion.upload_document_for_item(
                store, item_id, actor, document_url=document_url, document_name=document_name
            )
        else:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Provide a file or a document_url.",
            )
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    if result is None:
        raise item_not_found()
    return to_mutation_response(result)


@router.get("/{item_id}/document", response_model=DocumentLinkResponse)
async def get_document_link(
    item_id: int,
    store: ChecklistStore = Depends(get_checklist_store),
) -> DocumentLinkResponse:
    """Return a download link for the item's document."""
    item = await store.get_item(item_id)
    if item is None:
        raise item_not_found()
    if not item.document_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No document uploaded for this item",
        )
    if item.document_url.startswith(("http://", "https://")):
        # External reference, nothing to presign
        return DocumentLinkResponse(url=item.document_url, expires_in=0)
    url = await get_storage_service().get_download_url(item.document_url, expires_in=_DOWNLOAD_URL_TTL)
    return DocumentLinkResponse(url=url, expires_in=_DOWNLOAD_URL_TTL)


@router.post("/{item_id}/assessment-result", response_model=ItemMutationResponse)
async def record_assessment_result(
    item_id: int,
    body: AssessmentResultRequest,
    user: CurrentUser,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ItemMutationResponse:
    """Record a psychometric test outcome. The item stays pending."""
    try:
        result = await completion.record_psychometric_result(
            store, item_id, Actor.from_user(user), body.attempt_id, body.score
        )
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    if result is None:
        raise item_not_found()
    return to_mutation_response(result)


@router.post(
    "/{item_id}/verify",
    response_model=ItemMutationResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.HR_ADMIN))],
)
async def verify_document(
    item_id: int,
    body: VerifyDocumentRequest,
    user: CurrentUser,
    store: ChecklistStore = Depends(get_checklist_store),
) -> ItemMutationResponse:
    """HR sign-off on an uploaded document. Does not affect completion."""
    try:
        result = await completion.verify_document(
            store, item_id, Actor.from_user(user), notes=body.notes
        )
    except ChecklistError as exc:
        raise_for_checklist_error(exc)
    if result is None:
        raise item_not_found()
    return to_mutation_response(result)
