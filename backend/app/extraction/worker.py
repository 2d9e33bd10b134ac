"""Extraction worker: stored file -> model -> draft on the document row.

A document leaves ``processing`` exactly once, either to ``ready`` with a
validated draft or to ``error`` with a message.
"""

import logging
import time
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.documents import DocumentStateError, get_document, transition_status
from backend.app.db.models import Document
from backend.app.extraction.errors import DocumentFetchError, DownloadError, ExtractionError
from backend.app.extraction.parsing import parse_response
from backend.app.extraction.schemas import mime_type_for
from backend.app.llm.client import ExtractionClient
from backend.app.models.documents import DocumentStatus, FileType
from backend.app.models.drafts import ContractDraft, InvoiceDraft
from backend.app.storage.store import ObjectStore, StorageError
from backend.app.utils.logging import StructuredExtractionLogger
from backend.app.utils.metrics import PrometheusExtractionMetrics

logger = logging.getLogger(__name__)

_metrics = PrometheusExtractionMetrics()
_structured_logger = StructuredExtractionLogger()


async def _mark_error(
    session_factory: async_sessionmaker[AsyncSession],
    document_id: uuid.UUID,
    message: str,
) -> None:
    """Move the document to ``error``; a document already moved on is left alone."""
    async with session_factory() as session:
        try:
            await transition_status(
                session,
                document_id,
                expected=DocumentStatus.processing,
                target=DocumentStatus.error,
                error_message=message,
            )
            await session.commit()
        except (LookupError, DocumentStateError) as e:
            await session.rollback()
            logger.warning(f"Could not mark document {document_id} as error: {e}")


async def _extract(
    session_factory: async_sessionmaker[AsyncSession],
    storage: ObjectStore,
    client: ExtractionClient,
    document: Document,
    file_type: FileType,
) -> InvoiceDraft | ContractDraft:
    try:
        content = await storage.get(document.file_path)
    except StorageError as e:
        raise DownloadError(f"Failed to download file: {e}") from e

    response = await client.extract(
        file_type=file_type,
        content=content,
        mime_type=mime_type_for(document.file_name),
        file_name=document.file_name,
    )
    draft = parse_response(file_type, response)

    async with session_factory() as session:
        await transition_status(
            session,
            document.id,
            expected=DocumentStatus.processing,
            target=DocumentStatus.ready,
            draft_data=draft.model_dump(mode="json"),
            error_message=None,
        )
        await session.commit()

    return draft


async def process_document(
    document_id: uuid.UUID,
    *,
    session_factory: async_sessionmaker[AsyncSession],
    storage: ObjectStore,
    client: ExtractionClient,
) -> InvoiceDraft | ContractDraft:
    """Run extraction for one ``processing`` document.

    Args:
        document_id: Document to process
        session_factory: Session factory; the worker opens its own sessions
        storage: Object store holding the uploaded file
        client: Extraction model client

    Returns:
        The validated draft that was stored on the document

    Raises:
        DocumentFetchError: If the document is missing or not in ``processing``;
            nothing is written in that case.
        ExtractionError: On any other failure, after the document is moved
            to ``error``.
    """
    start_time = time.monotonic()

    async with session_factory() as session:
        document = await get_document(session, document_id)

    if document is None or document.status != DocumentStatus.processing.value:
        _metrics.inc_failure("unknown", DocumentFetchError.reason)
        if document is None:
            raise DocumentFetchError(f"Document not found: {document_id}")
        raise DocumentFetchError(
            f"Document {document_id} is {document.status}, expected {DocumentStatus.processing.value}"
        )

    file_type = FileType(document.file_type)

    try:
        draft = await _extract(session_factory, storage, client, document, file_type)
    except DocumentStateError as e:
        # Another writer moved the document on while the model was running
        elapsed_ms = (time.monotonic() - start_time) * 1000
        _metrics.inc_failure(file_type.value, DocumentFetchError.reason)
        _structured_logger.log_attempt(
            document_id, file_type.value, "error", elapsed_ms, error_reason=DocumentFetchError.reason
        )
        raise DocumentFetchError(str(e)) from e
    except ExtractionError as e:
        elapsed_ms = (time.monotonic() - start_time) * 1000
        await _mark_error(session_factory, document_id, str(e))
        _metrics.record_latency(file_type.value, "error", elapsed_ms)
        _metrics.inc_failure(file_type.value, e.reason)
        _structured_logger.log_attempt(document_id, file_type.value, "error", elapsed_ms, error_reason=e.reason)
        raise
    except Exception as e:
        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.exception(f"Unexpected failure processing document {document_id}")
        await _mark_error(session_factory, document_id, f"Unexpected extraction failure: {e}")
        _metrics.record_latency(file_type.value, "error", elapsed_ms)
        _metrics.inc_failure(file_type.value, ExtractionError.reason)
        _structured_logger.log_attempt(
            document_id, file_type.value, "error", elapsed_ms, error_reason=ExtractionError.reason
        )
        raise ExtractionError(str(e)) from e

    elapsed_ms = (time.monotonic() - start_time) * 1000
    _metrics.record_latency(file_type.value, "success", elapsed_ms)
    _structured_logger.log_attempt(document_id, file_type.value, "success", elapsed_ms)
    return draft
