"""Committed record, vendor and alert models."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class VendorCreate(BaseModel):
    """Request body for POST /vendors."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class VendorUpdate(BaseModel):
    """Request body for PATCH /vendors/{id}; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class VendorView(BaseModel):
    """Vendor as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: datetime


class InvoiceView(BaseModel):
    """Invoice row joined with vendor name and source file."""

    id: UUID
    document_id: UUID | None
    vendor_id: UUID | None
    vendor_name: str | None
    file_name: str | None
    invoice_number: str | None
    invoice_date: date | None
    due_date: date | None
    total_amount: float | None
    tax_amount: float | None
    items: list[dict[str, Any]]
    summary_text: str | None
    confidence_score: float | None
    payment_status: str
    created_at: datetime


class ContractView(BaseModel):
    """Contract row joined with vendor name and source file."""

    id: UUID
    document_id: UUID | None
    vendor_id: UUID | None
    vendor_name: str | None
    file_name: str | None
    parties: list[str]
    start_date: date | None
    end_date: date | None
    payment_amount: float | None
    summary_text: str | None
    confidence_score: float | None
    status: str
    created_at: datetime


class AlertView(BaseModel):
    """Alert as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    message: str | None
    type: str
    related_invoice_id: UUID | None
    is_read: bool
    created_at: datetime
