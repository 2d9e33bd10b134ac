"""Unit tests for UI helper functions."""

import json
import uuid

import httpx
import pytest

from backend.app.extraction.poller import PollPolicy
from backend.app.models.documents import DocumentStatus
from ui.helpers import (
    commit_document,
    confidence_badge,
    get_document,
    prefill_form,
    upload_document,
    vendor_selection,
    wait_for_document,
)

BACKEND = "http://backend.test"


@pytest.mark.parametrize(
    ("score", "expected"),
    [(0.95, (95, "green")), (0.8, (80, "green")), (0.5, (50, "orange")), (0.49, (49, "red")), (None, (0, "red"))],
)
def test_confidence_badge(score: float | None, expected: tuple[int, str]) -> None:
    """Test confidence percentage and colour thresholds."""
    assert confidence_badge(score) == expected


def test_vendor_selection_prefers_existing() -> None:
    """Test an existing vendor wins over a typed name."""
    assert vendor_selection("v-1", "Acme") == {"vendor_id": "v-1", "vendor_name": None}
    assert vendor_selection(None, "  Acme Co ") == {"vendor_id": None, "vendor_name": "Acme Co"}
    assert vendor_selection(None, "   ") == {"vendor_id": None, "vendor_name": None}


def test_prefill_form_from_invoice_draft() -> None:
    """Test the review form is pre-populated from draft_data."""
    document = {
        "file_type": "invoice",
        "draft_data": {
            "kind": "invoice",
            "invoice_number": "INV-7",
            "total_amount": 150.0,
            "items": [],
            "summary_text": "Widgets",
            "confidence_score": 0.9,
        },
    }

    form = prefill_form(document)

    assert form["kind"] == "invoice"
    assert form["invoice_number"] == "INV-7"
    assert form["total_amount"] == "150.0"
    assert form["tax_amount"] == ""


def test_prefill_form_without_draft() -> None:
    """Test an errored document yields an empty form of its kind."""
    assert prefill_form({"file_type": "contract", "draft_data": None}) == {"kind": "contract"}


def test_upload_document_sends_multipart() -> None:
    """Test upload posts the file and declared type."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202, json={"document": {"id": "d-1"}, "task_id": "t-1"})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    result = upload_document(BACKEND, "invoice.pdf", b"%PDF", "invoice", client=client)

    assert result["task_id"] == "t-1"
    body = captured[0].content
    assert b'name="file_type"' in body
    assert b"invoice.pdf" in body
    assert captured[0].headers["Authorization"].startswith("Bearer ")


def test_get_document_returns_none_on_404() -> None:
    """Test a missing document maps to None."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    assert get_document(BACKEND, "d-1", client=client) is None


def test_commit_document_raises_on_422() -> None:
    """Test a rejected commit surfaces the HTTP error."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content)["vendor"] == {"vendor_id": None, "vendor_name": None}
        return httpx.Response(422, json={"detail": "Please select or enter a vendor"})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.HTTPStatusError):
        commit_document(BACKEND, "d-1", {"vendor_id": None, "vendor_name": None}, {"kind": "invoice"}, client=client)


@pytest.mark.asyncio
async def test_wait_for_document_polls_until_ready() -> None:
    """Test polling through the API until the document is ready."""
    statuses = iter(["processing", "processing", "ready"])
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": next(statuses)})

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    status = await wait_for_document(
        BACKEND,
        str(uuid.uuid4()),
        policy=PollPolicy(initial_interval=2.0, backoff_factor=1.5),
        client=client,
        sleep_fn=fake_sleep,
    )

    assert status == DocumentStatus.ready
    assert sleeps == [2.0, 3.0]
