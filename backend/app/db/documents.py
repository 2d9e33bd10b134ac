"""Document row operations.

Owner-scoped helpers take a ``RequestContext``; the extraction worker passes
``ctx=None`` and runs with service privileges.
"""

import uuid
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Document
from backend.app.models.documents import DocumentStatus, FileType, check_transition


class DocumentNotFoundError(LookupError):
    """Document does not exist or is not visible to the caller."""

    def __init__(self, document_id: uuid.UUID) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class DocumentStateError(Exception):
    """Document is not in the lifecycle state the operation requires."""

    def __init__(self, document_id: uuid.UUID, actual: str, required: str) -> None:
        super().__init__(f"Document {document_id} is {actual}, expected {required}")
        self.document_id = document_id
        self.actual = actual
        self.required = required


async def create_document(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    file_name: str,
    file_path: str,
    file_type: FileType,
) -> Document:
    """Insert a new document in ``processing`` and commit."""
    document = Document(
        id=uuid.uuid4(),
        user_id=ctx.user_id,
        file_name=file_name,
        file_path=file_path,
        file_type=file_type.value,
        status=DocumentStatus.processing.value,
    )
    session.add(document)
    await session.commit()
    return document


async def get_document(
    session: AsyncSession,
    document_id: uuid.UUID,
    ctx: RequestContext | None = None,
) -> Document | None:
    """Fetch a document by id, scoped to the owner when ``ctx`` is given."""
    query = select(Document).where(Document.id == document_id)
    if ctx is not None:
        query = query.where(Document.user_id == ctx.user_id)

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def require_document(
    session: AsyncSession,
    document_id: uuid.UUID,
    ctx: RequestContext | None = None,
) -> Document:
    """Like ``get_document`` but raises DocumentNotFoundError."""
    document = await get_document(session, document_id, ctx)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return document


async def list_documents(
    session: AsyncSession, ctx: RequestContext, limit: int = 5
) -> list[Document]:
    """Most recent documents first."""
    result = await session.execute(
        select(Document)
        .where(Document.user_id == ctx.user_id)
        .order_by(Document.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def transition_status(
    session: AsyncSession,
    document_id: uuid.UUID,
    *,
    expected: DocumentStatus,
    target: DocumentStatus,
    **values: Any,
) -> None:
    """Move a document forward one lifecycle step.

    The update is conditional on the stored status still being ``expected``,
    so two writers racing on the same document cannot both win. Does not
    commit; the caller owns the transaction.

    Raises:
        InvalidStatusTransition: If ``expected -> target`` is not a forward step.
        DocumentStateError: If the stored status is no longer ``expected``.
    """
    check_transition(expected, target)

    result = await session.execute(
        update(Document)
        .where(Document.id == document_id, Document.status == expected.value)
        .values(status=target.value, **values)
    )

    if result.rowcount == 0:
        current = await session.scalar(select(Document.status).where(Document.id == document_id))
        if current is None:
            raise DocumentNotFoundError(document_id)
        raise DocumentStateError(document_id, current, expected.value)


async def delete_document(session: AsyncSession, document_id: uuid.UUID) -> None:
    """Delete the document row. Does not commit."""
    await session.execute(delete(Document).where(Document.id == document_id))
