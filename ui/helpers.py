"""Helper functions for UI - DocuFlow API client and pure view helpers."""

import uuid
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from backend.app.extraction.poller import PollPolicy, StatusPoller
from backend.app.models.documents import DocumentStatus, FileType
from backend.app.models.drafts import parse_draft
from backend.app.models.review import form_from_draft

DEV_USER_ID = "00000000-0000-0000-0000-000000000002"


def get_auth_header(user_id: str = DEV_USER_ID) -> dict[str, str]:
    """Get auth header for API calls (development user by default)."""
    return {"Authorization": f"Bearer {user_id}"}


def _client(client: httpx.Client | None) -> httpx.Client:
    return client or httpx.Client(timeout=30.0)


def _request(
    method: str,
    url: str,
    client: httpx.Client | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request with the auth header and raise on HTTP errors."""
    http = _client(client)
    try:
        response = http.request(method, url, headers=get_auth_header(), **kwargs)
        response.raise_for_status()
        return response
    finally:
        if client is None:
            http.close()


def upload_document(
    backend_url: str,
    file_name: str,
    content: bytes,
    file_type: str,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Upload a file; extraction starts in the background.

    Returns:
        UploadResponse dict with ``document`` and ``task_id``

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = _request(
        "POST",
        f"{backend_url}/documents",
        client,
        files={"file": (file_name, content)},
        data={"file_type": file_type},
    )
    result: dict[str, Any] = response.json()
    return result


def get_document(
    backend_url: str, document_id: str, client: httpx.Client | None = None
) -> dict[str, Any] | None:
    """Fetch one document, or None if it no longer exists."""
    try:
        response = _request("GET", f"{backend_url}/documents/{document_id}", client)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            return None
        raise
    result: dict[str, Any] = response.json()
    return result


async def wait_for_document(
    backend_url: str,
    document_id: str,
    policy: PollPolicy | None = None,
    client: httpx.AsyncClient | None = None,
    sleep_fn: Callable[[float], Awaitable[None]] | None = None,
) -> DocumentStatus:
    """Poll GET /documents/{id} until extraction finishes.

    Returns:
        ``ready`` or ``error``

    Raises:
        DocumentNotFoundError: If the document disappeared
        PollTimeoutError: If extraction did not finish in time
    """
    http = client or httpx.AsyncClient(timeout=30.0)

    async def fetch_status(doc_id: uuid.UUID) -> str | None:
        response = await http.get(f"{backend_url}/documents/{doc_id}", headers=get_auth_header())
        if response.status_code == 404:
            return None
        response.raise_for_status()
        status: str = response.json()["status"]
        return status

    poller = StatusPoller(fetch_status, policy=policy, sleep_fn=sleep_fn)
    try:
        return await poller.wait(uuid.UUID(document_id))
    finally:
        if client is None:
            await http.aclose()


def commit_document(
    backend_url: str,
    document_id: str,
    vendor: dict[str, Any],
    form: dict[str, Any],
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """Save the reviewed form.

    Raises:
        httpx.HTTPStatusError: If request fails (e.g. 422 when no vendor is chosen)
    """
    response = _request(
        "POST",
        f"{backend_url}/documents/{document_id}/commit",
        client,
        json={"vendor": vendor, "form": form},
    )
    result: dict[str, Any] = response.json()
    return result


def cancel_document(backend_url: str, document_id: str, client: httpx.Client | None = None) -> None:
    """Discard the document and its file."""
    _request("DELETE", f"{backend_url}/documents/{document_id}", client)


def get_json(backend_url: str, path: str, client: httpx.Client | None = None, **params: Any) -> Any:
    """GET a JSON resource (vendors, invoices, contracts, alerts, analytics)."""
    query = {k: v for k, v in params.items() if v is not None}
    return _request("GET", f"{backend_url}{path}", client, params=query).json()


def mark_alert_read(backend_url: str, alert_id: str, client: httpx.Client | None = None) -> None:
    """Mark one alert as read."""
    _request("POST", f"{backend_url}/alerts/{alert_id}/read", client)


def vendor_selection(existing_vendor_id: str | None, new_vendor_name: str) -> dict[str, Any]:
    """Commit payload for the vendor picker; an existing vendor wins over a typed name."""
    if existing_vendor_id:
        return {"vendor_id": existing_vendor_id, "vendor_name": None}
    name = new_vendor_name.strip()
    return {"vendor_id": None, "vendor_name": name or None}


def prefill_form(document: dict[str, Any]) -> dict[str, Any]:
    """Review form values pre-populated from the document's draft.

    Returns an empty form of the right kind when there is no usable draft.
    """
    file_type = FileType(document["file_type"])
    draft_data = document.get("draft_data")
    if not draft_data:
        return {"kind": file_type.value}

    draft = parse_draft(file_type, draft_data)
    return form_from_draft(draft).model_dump(mode="json")


def confidence_badge(score: float | None) -> tuple[int, str]:
    """Confidence as a whole percentage plus a colour: green >= 80, orange >= 50, else red."""
    percent = round((score or 0) * 100)
    if percent >= 80:
        return percent, "green"
    if percent >= 50:
        return percent, "orange"
    return percent, "red"
