"""Document endpoints - upload, status, review commit and cancel."""

import logging
import uuid
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel

from backend.app.api.deps import ContextDep, ServicesDep, SessionDep
from backend.app.db.documents import (
    DocumentNotFoundError,
    DocumentStateError,
    create_document,
    list_documents,
    require_document,
)
from backend.app.db.models import InvoiceData
from backend.app.db.records import to_contract_view, to_invoice_view
from backend.app.db.vendors import VendorNotFoundError
from backend.app.models.documents import DocumentView, FileType
from backend.app.models.records import ContractView, InvoiceView
from backend.app.models.review import CommitRequest
from backend.app.review.commit import (
    FormKindMismatchError,
    VendorRequiredError,
    cancel_document,
    commit_document,
)
from backend.app.storage.signing import SignedUrl
from backend.app.storage.store import StorageError, build_object_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


class UploadResponse(BaseModel):
    """Response for POST /documents."""

    document: DocumentView
    task_id: str


class DocumentListResponse(BaseModel):
    """Response for GET /documents."""

    documents: list[DocumentView]


class CommitResponse(BaseModel):
    """Response for POST /documents/{id}/commit."""

    document_id: str
    invoice: InvoiceView | None = None
    contract: ContractView | None = None


@router.post("", response_model=UploadResponse, status_code=status.HTTP_202_ACCEPTED)
async def upload_document(
    file: Annotated[UploadFile, File()],
    file_type: Annotated[FileType, Form()],
    ctx: ContextDep,
    session: SessionDep,
    services: ServicesDep,
) -> UploadResponse:
    """Store an uploaded file and start extraction in the background.

    Args:
        file: Invoice/receipt image or PDF, or contract
        file_type: Declared document type
        ctx: Request context (user_id)
        session: Database session
        services: Service container

    Returns:
        The new ``processing`` document and the extraction task id

    Raises:
        HTTPException: 413 if the file is too large, 422 if empty, 500 on storage failure
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Uploaded file is empty")
    if len(content) > services.settings.max_upload_bytes:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Uploaded file is too large")

    file_name = file.filename or "upload"
    object_path = build_object_path(ctx.user_id, file_name)

    try:
        await services.storage.put(object_path, content)
    except StorageError as e:
        logger.error(f"Upload failed for {object_path}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e

    try:
        document = await create_document(
            session, ctx, file_name=file_name, file_path=object_path, file_type=file_type
        )
    except Exception:
        await services.storage.delete(object_path)
        raise

    task = services.task_runner.enqueue(document.id)
    return UploadResponse(document=DocumentView.model_validate(document), task_id=str(task.task_id))


@router.get("", response_model=DocumentListResponse)
async def get_documents(
    ctx: ContextDep,
    session: SessionDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 5,
) -> DocumentListResponse:
    """Most recent documents, newest first."""
    documents = await list_documents(session, ctx, limit=limit)
    return DocumentListResponse(documents=[DocumentView.model_validate(d) for d in documents])


@router.get("/{document_id}", response_model=DocumentView)
async def get_document_by_id(
    document_id: uuid.UUID,
    ctx: ContextDep,
    session: SessionDep,
) -> DocumentView:
    """Fetch one document; clients poll this while extraction runs.

    Raises:
        HTTPException: 404 if the document is missing or not the caller's
    """
    try:
        document = await require_document(session, document_id, ctx)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DocumentView.model_validate(document)


@router.post("/{document_id}/commit", response_model=CommitResponse)
async def commit(
    document_id: uuid.UUID,
    request: CommitRequest,
    ctx: ContextDep,
    session: SessionDep,
) -> CommitResponse:
    """Save the reviewed form as an invoice or contract record.

    Raises:
        HTTPException: 404 if the document or vendor is not found,
            409 if the document is not ready, 422 on an invalid form
    """
    try:
        record = await commit_document(session, ctx, document_id, request)
    except (DocumentNotFoundError, VendorNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except DocumentStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except (VendorRequiredError, FormKindMismatchError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    if isinstance(record, InvoiceData):
        return CommitResponse(document_id=str(document_id), invoice=to_invoice_view(record))
    return CommitResponse(document_id=str(document_id), contract=to_contract_view(record))


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel(
    document_id: uuid.UUID,
    ctx: ContextDep,
    session: SessionDep,
    services: ServicesDep,
) -> None:
    """Discard a document and its stored file without saving a record.

    Raises:
        HTTPException: 404 if not found, 409 if still processing or already saved
    """
    try:
        await cancel_document(session, services.storage, ctx, document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except DocumentStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.get("/{document_id}/file-url")
async def get_file_url(
    document_id: uuid.UUID,
    ctx: ContextDep,
    session: SessionDep,
    services: ServicesDep,
) -> dict[str, Any]:
    """Short-lived signed URL for viewing the original file.

    Raises:
        HTTPException: 404 if the document is missing or not the caller's
    """
    try:
        document = await require_document(session, document_id, ctx)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    signed: SignedUrl = services.signer.sign(document.file_path)
    return {"url": signed.url, "expires_at": signed.expires_at}
