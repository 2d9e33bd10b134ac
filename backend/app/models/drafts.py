"""Draft extraction models - the tagged union stored in ``document.draft_data``.

The model's raw output is validated into ``InvoiceDraft`` or ``ContractDraft``
according to the document's declared type before anything is persisted.
Vendor fields are deliberately absent: vendor identity is resolved by the
reviewer, not the model.
"""

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from backend.app.models.documents import FileType


class LineItem(BaseModel):
    """One invoice line."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    description: str = ""
    quantity: float | None = None
    unit_price: float | None = None
    amount: float | None = None

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value: Any) -> Any:
        """A null description is stored as an empty string."""
        return "" if value is None else value


class _DraftBase(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    summary_text: str = Field(..., description="Brief summary of the document")
    confidence_score: float = Field(..., description="Model self-reported certainty, 0-1")

    @field_validator("confidence_score")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        """Clamp into [0, 1]; NaN is rejected."""
        if math.isnan(value):
            raise ValueError("confidence_score must be a number")
        return min(max(value, 0.0), 1.0)


class InvoiceDraft(_DraftBase):
    """Extraction draft for an invoice or receipt."""

    kind: Literal["invoice"] = "invoice"
    invoice_number: str | None = None
    invoice_date: str | None = None
    due_date: str | None = None
    total_amount: float | None = None
    tax_amount: float | None = None
    items: list[LineItem] = Field(default_factory=list)


class ContractDraft(_DraftBase):
    """Extraction draft for a contract."""

    kind: Literal["contract"] = "contract"
    parties: list[str] = Field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None
    payment_amount: float | None = None


DocumentDraft = Annotated[InvoiceDraft | ContractDraft, Field(discriminator="kind")]

_draft_adapter: TypeAdapter[InvoiceDraft | ContractDraft] = TypeAdapter(DocumentDraft)


def parse_draft(file_type: FileType, data: dict[str, Any]) -> InvoiceDraft | ContractDraft:
    """Validate raw extracted data as the draft variant for ``file_type``.

    The declared type always wins over any ``kind`` the payload carries.

    Raises:
        pydantic.ValidationError: If required fields are missing or malformed.
    """
    tagged = {**data, "kind": file_type.value}
    return _draft_adapter.validate_python(tagged)
