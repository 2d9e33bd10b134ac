"""Tests for the Resend email sender."""

import json

import httpx
import pytest

from backend.app.notifications.email import DisabledEmailSender, EmailDeliveryError, ResendEmailSender


@pytest.mark.asyncio
async def test_resend_sender_posts_message() -> None:
    """Test the request body and auth header sent to Resend."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "email_123"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    sender = ResendEmailSender(
        api_key="re_test",
        sender="DocuFlow AI <onboarding@resend.dev>",
        recipient="delivered@resend.dev",
        client=client,
    )

    await sender.send(subject="Invoice INV-7 due today", html="<p>hi</p>")

    assert len(captured) == 1
    request = captured[0]
    assert str(request.url) == "https://api.resend.com/emails"
    assert request.headers["Authorization"] == "Bearer re_test"
    body = json.loads(request.content)
    assert body == {
        "from": "DocuFlow AI <onboarding@resend.dev>",
        "to": ["delivered@resend.dev"],
        "subject": "Invoice INV-7 due today",
        "html": "<p>hi</p>",
    }


@pytest.mark.asyncio
async def test_resend_sender_raises_on_http_error() -> None:
    """Test provider errors become EmailDeliveryError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "invalid from"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    sender = ResendEmailSender(api_key="re_test", sender="a@b.c", recipient="d@e.f", client=client)

    with pytest.raises(EmailDeliveryError):
        await sender.send(subject="s", html="h")


@pytest.mark.asyncio
async def test_disabled_sender_is_noop() -> None:
    """Test the disabled sender never raises."""
    await DisabledEmailSender().send(subject="s", html="h")
