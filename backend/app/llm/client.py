"""LLM client for document extraction with OpenAI-compatible function calling.

Security: Reads API key from settings only, never hardcoded.
Provides a deterministic stub when no key is present for local runs and tests.
"""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from openai import APIError, AsyncOpenAI

from backend.app.config import Settings
from backend.app.extraction.errors import ModelCallError
from backend.app.extraction.schemas import (
    TOOL_NAME,
    USER_INSTRUCTION,
    system_prompt_for,
    tool_for,
)
from backend.app.models.documents import FileType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelResponse:
    """Raw model answer before parsing.

    ``tool_arguments`` holds the forced function call's JSON arguments when the
    model honoured the contract; ``text`` holds any free-text content.
    """

    tool_arguments: str | None
    text: str | None


class ExtractionClient(Protocol):
    """Protocol for extraction model clients."""

    async def extract(
        self,
        *,
        file_type: FileType,
        content: bytes,
        mime_type: str,
        file_name: str,
    ) -> ModelResponse:
        """Ask the model for structured data from one document.

        Args:
            file_type: Declared document type; selects prompt and tool schema
            content: Raw file bytes
            mime_type: MIME type sent alongside the encoded file
            file_name: Original file name

        Returns:
            ModelResponse with the function-call arguments and/or text

        Raises:
            ModelCallError: On network or API errors
        """
        ...


_STUB_INVOICE: dict[str, Any] = {
    "invoice_number": "INV-0001",
    "invoice_date": "2025-01-15",
    "due_date": "2025-02-14",
    "total_amount": 110.0,
    "tax_amount": 10.0,
    "items": [{"description": "Consulting services", "quantity": 1, "unit_price": 100.0, "amount": 100.0}],
    "summary_text": "Stub extraction: single-line consulting invoice.",
    "confidence_score": 0.5,
}

_STUB_CONTRACT: dict[str, Any] = {
    "parties": ["Party A", "Party B"],
    "start_date": "2025-01-01",
    "end_date": "2025-12-31",
    "payment_amount": 12000.0,
    "summary_text": "Stub extraction: twelve-month service agreement.",
    "confidence_score": 0.5,
}


class DeterministicStubClient:
    """Deterministic stub client (no API key required)."""

    async def extract(
        self,
        *,
        file_type: FileType,
        content: bytes,
        mime_type: str,
        file_name: str,
    ) -> ModelResponse:
        """Return a fixed, schema-valid function call for the declared type."""
        payload = _STUB_CONTRACT if file_type == FileType.contract else _STUB_INVOICE
        return ModelResponse(tool_arguments=json.dumps(payload), text=None)


class OpenAICompatibleExtractionClient:
    """Extraction client for any OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize client.

        Args:
            api_key: Provider API key (read from settings)
            model: Vision-capable model name
            base_url: OpenAI-compatible endpoint (None = api.openai.com)
            timeout: Request timeout in seconds
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model

    def _build_messages(
        self, file_type: FileType, content: bytes, mime_type: str, file_name: str
    ) -> list[dict[str, Any]]:
        """System prompt plus a user turn carrying the file as a data URL."""
        data_url = f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"

        if mime_type == "application/pdf":
            file_part: dict[str, Any] = {
                "type": "file",
                "file": {"filename": file_name, "file_data": data_url},
            }
        else:
            file_part = {"type": "image_url", "image_url": {"url": data_url}}

        return [
            {"role": "system", "content": system_prompt_for(file_type)},
            {"role": "user", "content": [{"type": "text", "text": USER_INSTRUCTION}, file_part]},
        ]

    async def extract(
        self,
        *,
        file_type: FileType,
        content: bytes,
        mime_type: str,
        file_name: str,
    ) -> ModelResponse:
        """Call the model with the extraction tool forced."""
        messages = self._build_messages(file_type, content, mime_type, file_name)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,  # type: ignore[arg-type]
                tools=[tool_for(file_type)],  # type: ignore[list-item]
                tool_choice={"type": "function", "function": {"name": TOOL_NAME}},
                temperature=0,
            )
        except APIError as e:
            logger.error(f"Extraction model call failed: {e}")
            raise ModelCallError(f"AI processing failed: {e}") from e

        if not response.choices:
            return ModelResponse(tool_arguments=None, text=None)

        message = response.choices[0].message
        tool_arguments = None
        for call in message.tool_calls or []:
            if call.type == "function" and call.function.name == TOOL_NAME:
                tool_arguments = call.function.arguments
                break

        return ModelResponse(tool_arguments=tool_arguments, text=message.content)


def get_extraction_client(settings: Settings) -> ExtractionClient:
    """Factory function to get appropriate extraction client based on config.

    Returns:
        OpenAICompatibleExtractionClient if an API key is configured,
        DeterministicStubClient otherwise
    """
    api_key = settings.llm_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using {settings.llm_model} for document extraction")
        return OpenAICompatibleExtractionClient(
            api_key=api_key.get_secret_value(),
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
        )

    logger.warning("No LLM API key configured, using deterministic stub client")
    return DeterministicStubClient()
