"""Transactional email delivery via the Resend HTTP API."""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Email provider rejected the message or was unreachable."""

    pass


class EmailSender(Protocol):
    """Protocol for email senders."""

    async def send(self, *, subject: str, html: str) -> None:
        """Send one message to the configured recipient.

        Raises:
            EmailDeliveryError: On network or provider errors
        """
        ...


class ResendEmailSender:
    """Email sender backed by Resend's ``POST /emails`` endpoint."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        recipient: str,
        api_url: str = "https://api.resend.com/emails",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize sender.

        Args:
            api_key: Resend API key (read from settings)
            sender: From header, e.g. ``"DocuFlow AI <onboarding@resend.dev>"``
            recipient: Destination address
            api_url: Resend endpoint
            client: Optional httpx client (for testing with mocks)
        """
        self._api_key = api_key
        self._sender = sender
        self._recipient = recipient
        self._api_url = api_url
        self._client = client

    async def send(self, *, subject: str, html: str) -> None:
        """Send one message."""
        payload = {
            "from": self._sender,
            "to": [self._recipient],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=10.0)
            close_client = True

        try:
            response = await client.post(self._api_url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Resend delivery failed: {e}") from e
        finally:
            if close_client:
                await client.aclose()


class DisabledEmailSender:
    """Sender used when no email API key is configured; messages are only logged."""

    async def send(self, *, subject: str, html: str) -> None:
        """Log instead of sending."""
        logger.info(f"Email delivery disabled, skipping: {subject}")
