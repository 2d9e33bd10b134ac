"""Unit tests for extraction draft models."""

import pytest
from pydantic import ValidationError

from backend.app.models.documents import FileType
from backend.app.models.drafts import ContractDraft, InvoiceDraft, parse_draft


def test_parse_invoice_draft() -> None:
    """Test an invoice payload becomes an InvoiceDraft."""
    draft = parse_draft(
        FileType.invoice,
        {
            "invoice_number": "INV-7",
            "total_amount": 150.0,
            "items": [{"description": "Widgets", "quantity": 3, "unit_price": 50, "amount": 150}],
            "summary_text": "Widget order",
            "confidence_score": 0.92,
        },
    )

    assert isinstance(draft, InvoiceDraft)
    assert draft.kind == "invoice"
    assert draft.invoice_number == "INV-7"
    assert draft.items[0].quantity == 3.0
    assert draft.due_date is None


def test_parse_contract_draft() -> None:
    """Test a contract payload becomes a ContractDraft."""
    draft = parse_draft(
        FileType.contract,
        {"parties": ["Acme Co", "Globex"], "summary_text": "MSA", "confidence_score": 0.7},
    )

    assert isinstance(draft, ContractDraft)
    assert draft.parties == ["Acme Co", "Globex"]


def test_declared_type_wins_over_payload_kind() -> None:
    """Test the document's declared type selects the variant."""
    draft = parse_draft(
        FileType.contract,
        {"kind": "invoice", "summary_text": "MSA", "confidence_score": 0.5},
    )

    assert isinstance(draft, ContractDraft)


def test_vendor_fields_are_dropped() -> None:
    """Test that vendor data from the model is ignored."""
    draft = parse_draft(
        FileType.invoice,
        {"vendor_name": "Acme Co", "summary_text": "x", "confidence_score": 0.5},
    )

    assert "vendor_name" not in draft.model_dump()


@pytest.mark.parametrize(("raw", "expected"), [(1.7, 1.0), (-0.2, 0.0), (0.42, 0.42)])
def test_confidence_is_clamped(raw: float, expected: float) -> None:
    """Test confidence_score is clamped into [0, 1]."""
    draft = parse_draft(FileType.invoice, {"summary_text": "x", "confidence_score": raw})

    assert draft.confidence_score == expected


def test_missing_required_fields_rejected() -> None:
    """Test summary_text and confidence_score are required."""
    with pytest.raises(ValidationError):
        parse_draft(FileType.invoice, {"invoice_number": "INV-1"})


def test_nan_confidence_rejected() -> None:
    """Test NaN confidence is rejected."""
    with pytest.raises(ValidationError):
        parse_draft(FileType.invoice, {"summary_text": "x", "confidence_score": float("nan")})


def test_numeric_text_fields_become_strings() -> None:
    """Test numbers the model returns for text fields are kept as text."""
    draft = parse_draft(
        FileType.invoice,
        {"invoice_number": 12345, "due_date": 20250214, "summary_text": "x", "confidence_score": 0.5},
    )

    assert isinstance(draft, InvoiceDraft)
    assert draft.invoice_number == "12345"
    assert draft.due_date == "20250214"


def test_numeric_party_names_become_strings() -> None:
    """Test contract parties given as numbers are kept as text."""
    draft = parse_draft(FileType.contract, {"parties": ["Acme", 42], "summary_text": "x", "confidence_score": 0.5})

    assert isinstance(draft, ContractDraft)
    assert draft.parties == ["Acme", "42"]


def test_null_line_item_description_is_blank() -> None:
    """Test a line without a description keeps its amounts."""
    draft = parse_draft(
        FileType.invoice,
        {"items": [{"description": None, "amount": 5}], "summary_text": "x", "confidence_score": 0.5},
    )

    assert isinstance(draft, InvoiceDraft)
    assert draft.items[0].description == ""
    assert draft.items[0].amount == 5.0
