"""Review form models and field coercion.

Form values arrive as the reviewer typed them. Coercion rules:

- top-level amounts: blank -> None, number -> float, garbage -> None
- line-item numbers: number -> float, blank or garbage -> 0.0
- dates: blank -> None, otherwise ISO ``YYYY-MM-DD`` (anything else is rejected)
- free text: blank -> None
"""

import math
from datetime import date
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from backend.app.models.drafts import ContractDraft, InvoiceDraft

FormNumber = str | float | None


def _to_float(value: FormNumber) -> float | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_amount(value: FormNumber) -> float | None:
    """Coerce a top-level amount: blank or unparseable becomes None."""
    return _to_float(value)


def parse_item_number(value: FormNumber) -> float:
    """Coerce a line-item number: blank or unparseable becomes 0."""
    number = _to_float(value)
    return 0.0 if number is None else number


def parse_form_date(value: Any) -> date | None:
    """Blank -> None; ISO date string -> date."""
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return date.fromisoformat(text)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def _as_form_text(value: float | None) -> str:
    return "" if value is None else str(value)


class VendorSelection(BaseModel):
    """Vendor chosen in the review dialog.

    Exactly one of the modes applies: an existing vendor id, a newly typed
    name, or nothing (rejected at commit).
    """

    vendor_id: UUID | None = None
    vendor_name: str | None = None


class LineItemForm(BaseModel):
    """Editable invoice line."""

    description: str = ""
    quantity: FormNumber = ""
    unit_price: FormNumber = ""
    amount: FormNumber = ""

    def to_item(self) -> dict[str, Any]:
        """Stored shape of the line item."""
        return {
            "description": self.description,
            "quantity": parse_item_number(self.quantity),
            "unit_price": parse_item_number(self.unit_price),
            "amount": parse_item_number(self.amount),
        }


class _ReviewFormBase(BaseModel):
    summary_text: str = ""
    confidence_score: float = Field(0.0, ge=0.0, le=1.0)


class InvoiceReviewForm(_ReviewFormBase):
    """Editable invoice fields."""

    kind: Literal["invoice"] = "invoice"
    invoice_number: str = ""
    invoice_date: date | None = None
    due_date: date | None = None
    total_amount: FormNumber = ""
    tax_amount: FormNumber = ""
    items: list[LineItemForm] = Field(default_factory=list)

    @field_validator("invoice_date", "due_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> date | None:
        """Blank dates become None."""
        return parse_form_date(value)

    @classmethod
    def from_draft(cls, draft: InvoiceDraft) -> "InvoiceReviewForm":
        """Pre-populate the form from the model's draft."""
        return cls(
            invoice_number=draft.invoice_number or "",
            invoice_date=_safe_date(draft.invoice_date),
            due_date=_safe_date(draft.due_date),
            total_amount=_as_form_text(draft.total_amount),
            tax_amount=_as_form_text(draft.tax_amount),
            items=[
                LineItemForm(
                    description=item.description,
                    quantity=_as_form_text(item.quantity),
                    unit_price=_as_form_text(item.unit_price),
                    amount=_as_form_text(item.amount),
                )
                for item in draft.items
            ],
            summary_text=draft.summary_text,
            confidence_score=draft.confidence_score,
        )

    def to_record_values(self) -> dict[str, Any]:
        """Column values for ``invoice_data``."""
        return {
            "invoice_number": _blank_to_none(self.invoice_number),
            "invoice_date": self.invoice_date,
            "due_date": self.due_date,
            "total_amount": parse_amount(self.total_amount),
            "tax_amount": parse_amount(self.tax_amount),
            "items": [item.to_item() for item in self.items],
            "summary_text": _blank_to_none(self.summary_text),
            "confidence_score": self.confidence_score,
        }


class ContractReviewForm(_ReviewFormBase):
    """Editable contract fields."""

    kind: Literal["contract"] = "contract"
    parties: list[str] = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    payment_amount: FormNumber = ""

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> date | None:
        """Blank dates become None."""
        return parse_form_date(value)

    @classmethod
    def from_draft(cls, draft: ContractDraft) -> "ContractReviewForm":
        """Pre-populate the form from the model's draft."""
        return cls(
            parties=list(draft.parties),
            start_date=_safe_date(draft.start_date),
            end_date=_safe_date(draft.end_date),
            payment_amount=_as_form_text(draft.payment_amount),
            summary_text=draft.summary_text,
            confidence_score=draft.confidence_score,
        )

    def to_record_values(self) -> dict[str, Any]:
        """Column values for ``contract_data``."""
        return {
            "parties": [p.strip() for p in self.parties if p.strip()],
            "start_date": self.start_date,
            "end_date": self.end_date,
            "payment_amount": parse_amount(self.payment_amount),
            "summary_text": _blank_to_none(self.summary_text),
            "confidence_score": self.confidence_score,
        }


ReviewForm = Annotated[InvoiceReviewForm | ContractReviewForm, Field(discriminator="kind")]


class CommitRequest(BaseModel):
    """Request body for POST /documents/{id}/commit."""

    vendor: VendorSelection = Field(default_factory=VendorSelection)
    form: ReviewForm


def form_from_draft(draft: InvoiceDraft | ContractDraft) -> InvoiceReviewForm | ContractReviewForm:
    """Build the editable form matching the draft variant."""
    if isinstance(draft, InvoiceDraft):
        return InvoiceReviewForm.from_draft(draft)
    return ContractReviewForm.from_draft(draft)


def _safe_date(value: str | None) -> date | None:
    # Model-supplied dates are suggestions; an unreadable one leaves the field blank
    try:
        return parse_form_date(value)
    except ValueError:
        return None
