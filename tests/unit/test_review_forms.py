"""Unit tests for review form coercion."""

from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from backend.app.models.drafts import ContractDraft, InvoiceDraft, LineItem
from backend.app.models.review import (
    CommitRequest,
    ContractReviewForm,
    InvoiceReviewForm,
    LineItemForm,
    ReviewForm,
    form_from_draft,
    parse_amount,
    parse_item_number,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("", None), ("   ", None), ("abc", None), ("12.5", 12.5), (7, 7.0), (None, None)],
)
def test_parse_amount(raw: str | float | None, expected: float | None) -> None:
    """Test top-level amounts: blank or garbage becomes None."""
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("", 0.0), ("abc", 0.0), ("3", 3.0), (2.5, 2.5), (None, 0.0)],
)
def test_parse_item_number(raw: str | float | None, expected: float) -> None:
    """Test line-item numbers: blank or garbage becomes 0."""
    assert parse_item_number(raw) == expected


def test_amount_coercion_asymmetry() -> None:
    """Test a blank total is null while a garbage line quantity is zero."""
    form = InvoiceReviewForm(
        total_amount="",
        items=[LineItemForm(description="Widgets", quantity="abc", unit_price="", amount="10")],
    )

    values = form.to_record_values()

    assert values["total_amount"] is None
    assert values["items"] == [{"description": "Widgets", "quantity": 0.0, "unit_price": 0.0, "amount": 10.0}]


def test_blank_text_and_dates_become_null() -> None:
    """Test blank strings are stored as null."""
    form = InvoiceReviewForm(invoice_number="  ", invoice_date="", due_date="2025-03-01", summary_text="")

    values = form.to_record_values()

    assert values["invoice_number"] is None
    assert values["invoice_date"] is None
    assert values["due_date"] == date(2025, 3, 1)
    assert values["summary_text"] is None


def test_invalid_date_rejected() -> None:
    """Test a non-ISO date fails validation."""
    with pytest.raises(ValidationError):
        InvoiceReviewForm(due_date="03/01/2025")


def test_contract_parties_drop_blanks() -> None:
    """Test blank party entries are dropped."""
    form = ContractReviewForm(parties=["Acme Co", "  ", "", " Globex "], payment_amount="1000")

    values = form.to_record_values()

    assert values["parties"] == ["Acme Co", "Globex"]
    assert values["payment_amount"] == 1000.0


def test_form_from_invoice_draft_prefills_text() -> None:
    """Test the review form is pre-populated from the draft."""
    draft = InvoiceDraft(
        invoice_number="INV-9",
        invoice_date="2025-01-15",
        due_date="not a date",
        total_amount=99.5,
        items=[LineItem(description="Hours", quantity=2, unit_price=None, amount=99.5)],
        summary_text="Consulting",
        confidence_score=0.8,
    )

    form = form_from_draft(draft)

    assert isinstance(form, InvoiceReviewForm)
    assert form.invoice_date == date(2025, 1, 15)
    assert form.due_date is None
    assert form.total_amount == "99.5"
    assert form.tax_amount == ""
    assert form.items[0].unit_price == ""
    assert form.confidence_score == 0.8


def test_form_from_contract_draft() -> None:
    """Test contract drafts produce contract forms."""
    draft = ContractDraft(parties=["A", "B"], summary_text="NDA", confidence_score=0.6)

    form = form_from_draft(draft)

    assert isinstance(form, ContractReviewForm)
    assert form.parties == ["A", "B"]
    assert form.payment_amount == ""


def test_review_form_union_uses_kind() -> None:
    """Test the kind tag selects the form variant."""
    adapter: TypeAdapter[InvoiceReviewForm | ContractReviewForm] = TypeAdapter(ReviewForm)

    form = adapter.validate_python({"kind": "contract", "parties": ["A"]})

    assert isinstance(form, ContractReviewForm)


def test_commit_request_defaults_to_no_vendor() -> None:
    """Test an omitted vendor selection is empty."""
    request = CommitRequest.model_validate({"form": {"kind": "invoice"}})

    assert request.vendor.vendor_id is None
    assert request.vendor.vendor_name is None
