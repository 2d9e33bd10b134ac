"""Invoice and contract record operations."""

import uuid
from datetime import date
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import ContractData, InvoiceData, Vendor
from backend.app.models.records import ContractView, InvoiceView


async def add_invoice(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    document_id: uuid.UUID,
    vendor_id: uuid.UUID | None,
    values: dict[str, Any],
) -> InvoiceData:
    """Stage an invoice record and flush. Does not commit."""
    record = InvoiceData(
        id=uuid.uuid4(),
        user_id=ctx.user_id,
        document_id=document_id,
        vendor_id=vendor_id,
        **values,
    )
    session.add(record)
    await session.flush()
    return record


async def add_contract(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    document_id: uuid.UUID,
    vendor_id: uuid.UUID | None,
    values: dict[str, Any],
) -> ContractData:
    """Stage a contract record and flush. Does not commit."""
    record = ContractData(
        id=uuid.uuid4(),
        user_id=ctx.user_id,
        document_id=document_id,
        vendor_id=vendor_id,
        **values,
    )
    session.add(record)
    await session.flush()
    return record


async def list_invoices(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[InvoiceData]:
    """Invoices newest first; ``search`` matches invoice number or vendor name."""
    query = (
        select(InvoiceData)
        .outerjoin(Vendor, InvoiceData.vendor_id == Vendor.id)
        .where(InvoiceData.user_id == ctx.user_id)
    )
    if search:
        needle = search.lower()
        query = query.where(
            or_(
                func.lower(InvoiceData.invoice_number).contains(needle),
                func.lower(Vendor.name).contains(needle),
            )
        )
    query = query.order_by(InvoiceData.created_at.desc()).limit(limit).offset(offset)

    result = await session.execute(query)
    return list(result.scalars().all())


async def list_contracts(
    session: AsyncSession,
    ctx: RequestContext,
    *,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[ContractData]:
    """Contracts newest first; ``search`` matches vendor name or summary."""
    query = (
        select(ContractData)
        .outerjoin(Vendor, ContractData.vendor_id == Vendor.id)
        .where(ContractData.user_id == ctx.user_id)
    )
    if search:
        needle = search.lower()
        query = query.where(
            or_(
                func.lower(Vendor.name).contains(needle),
                func.lower(ContractData.summary_text).contains(needle),
            )
        )
    query = query.order_by(ContractData.created_at.desc()).limit(limit).offset(offset)

    result = await session.execute(query)
    return list(result.scalars().all())


async def list_pending_invoices_due(
    session: AsyncSession, start: date, end: date
) -> list[InvoiceData]:
    """Pending invoices with ``start <= due_date <= end`` across all owners."""
    result = await session.execute(
        select(InvoiceData)
        .where(
            InvoiceData.payment_status == "pending",
            InvoiceData.due_date >= start,
            InvoiceData.due_date <= end,
        )
        .order_by(InvoiceData.due_date)
    )
    return list(result.scalars().all())


def to_invoice_view(record: InvoiceData) -> InvoiceView:
    """Flatten an invoice row and its joined vendor/document."""
    return InvoiceView(
        id=record.id,
        document_id=record.document_id,
        vendor_id=record.vendor_id,
        vendor_name=record.vendor.name if record.vendor else None,
        file_name=record.document.file_name if record.document else None,
        invoice_number=record.invoice_number,
        invoice_date=record.invoice_date,
        due_date=record.due_date,
        total_amount=record.total_amount,
        tax_amount=record.tax_amount,
        items=record.items or [],
        summary_text=record.summary_text,
        confidence_score=record.confidence_score,
        payment_status=record.payment_status,
        created_at=record.created_at,
    )


def to_contract_view(record: ContractData) -> ContractView:
    """Flatten a contract row and its joined vendor/document."""
    return ContractView(
        id=record.id,
        document_id=record.document_id,
        vendor_id=record.vendor_id,
        vendor_name=record.vendor.name if record.vendor else None,
        file_name=record.document.file_name if record.document else None,
        parties=record.parties or [],
        start_date=record.start_date,
        end_date=record.end_date,
        payment_amount=record.payment_amount,
        summary_text=record.summary_text,
        confidence_score=record.confidence_score,
        status=record.status,
        created_at=record.created_at,
    )
