"""Human review actions: commit a ready draft, or cancel and discard it."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.documents import (
    DocumentStateError,
    delete_document,
    require_document,
    transition_status,
)
from backend.app.db.models import ContractData, InvoiceData
from backend.app.db.records import add_contract, add_invoice
from backend.app.db.vendors import VendorNotFoundError, add_vendor, get_vendor
from backend.app.models.documents import CANCELLABLE_STATUSES, DocumentStatus
from backend.app.models.review import CommitRequest, InvoiceReviewForm, VendorSelection
from backend.app.storage.store import ObjectStore

logger = logging.getLogger(__name__)


class VendorRequiredError(ValueError):
    """Neither an existing vendor nor a new vendor name was supplied."""

    def __init__(self) -> None:
        super().__init__("Please select or enter a vendor")


class FormKindMismatchError(ValueError):
    """Submitted form variant does not match the document's declared type."""

    def __init__(self, file_type: str, kind: str) -> None:
        super().__init__(f"Document is a {file_type}, but a {kind} form was submitted")
        self.file_type = file_type
        self.kind = kind


async def _resolve_vendor(
    session: AsyncSession, ctx: RequestContext, selection: VendorSelection
) -> uuid.UUID:
    if selection.vendor_id is not None:
        vendor = await get_vendor(session, selection.vendor_id, ctx)
        if vendor is None:
            raise VendorNotFoundError(selection.vendor_id)
        return vendor.id

    name = (selection.vendor_name or "").strip()
    if not name:
        raise VendorRequiredError()

    vendor = await add_vendor(session, ctx, name=name)
    logger.info(f"Created vendor {vendor.id} ({name}) during review commit")
    return vendor.id


async def commit_document(
    session: AsyncSession,
    ctx: RequestContext,
    document_id: uuid.UUID,
    request: CommitRequest,
) -> InvoiceData | ContractData:
    """Persist the reviewed form as a record and mark the document saved.

    The vendor insert (if any), the record insert and the status change
    happen in one transaction; on any failure nothing is written.

    Raises:
        DocumentNotFoundError: If the document is missing or not the caller's.
        DocumentStateError: If the document is not ``ready``.
        FormKindMismatchError: If the form variant differs from the declared type.
        VendorNotFoundError: If the selected vendor is not the caller's.
        VendorRequiredError: If no vendor was selected or typed.
    """
    try:
        document = await require_document(session, document_id, ctx)
        if document.status != DocumentStatus.ready.value:
            raise DocumentStateError(document_id, document.status, DocumentStatus.ready.value)

        form = request.form
        if form.kind != document.file_type:
            raise FormKindMismatchError(document.file_type, form.kind)

        vendor_id = await _resolve_vendor(session, ctx, request.vendor)

        record: InvoiceData | ContractData
        if isinstance(form, InvoiceReviewForm):
            record = await add_invoice(
                session, ctx, document_id=document_id, vendor_id=vendor_id, values=form.to_record_values()
            )
        else:
            record = await add_contract(
                session, ctx, document_id=document_id, vendor_id=vendor_id, values=form.to_record_values()
            )

        await transition_status(
            session, document_id, expected=DocumentStatus.ready, target=DocumentStatus.saved
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    # Reload with the joined vendor and document for the response
    model = type(record)
    record = (
        await session.execute(
            select(model).where(model.id == record.id).execution_options(populate_existing=True)
        )
    ).scalar_one()
    logger.info(f"Committed {form.kind} {record.id} from document {document_id}")
    return record


async def cancel_document(
    session: AsyncSession,
    storage: ObjectStore,
    ctx: RequestContext,
    document_id: uuid.UUID,
) -> None:
    """Discard a reviewed-but-uncommitted document and its stored file.

    Raises:
        DocumentNotFoundError: If the document is missing or not the caller's.
        DocumentStateError: If the document is not ``ready`` or ``error``.
    """
    document = await require_document(session, document_id, ctx)
    if DocumentStatus(document.status) not in CANCELLABLE_STATUSES:
        raise DocumentStateError(document_id, document.status, "ready or error")

    await storage.delete(document.file_path)
    await delete_document(session, document_id)
    await session.commit()
    logger.info(f"Cancelled document {document_id} and removed {document.file_path}")
