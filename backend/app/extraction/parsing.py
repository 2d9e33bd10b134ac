"""Turn a raw model response into a validated draft."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from backend.app.extraction.errors import ExtractionFormatError
from backend.app.llm.client import ModelResponse
from backend.app.models.documents import FileType
from backend.app.models.drafts import ContractDraft, InvoiceDraft, parse_draft

logger = logging.getLogger(__name__)


def _loads_object(raw: str) -> dict[str, Any] | None:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def _embedded_object(text: str) -> dict[str, Any] | None:
    """Parse the span from the first ``{`` to the last ``}``."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return _loads_object(text[start : end + 1])


def extract_payload(response: ModelResponse) -> dict[str, Any]:
    """Pick the extraction payload out of a model response.

    The function call's arguments win; otherwise a JSON object embedded in
    the text content is accepted.

    Raises:
        ExtractionFormatError: If neither yields a JSON object.
    """
    if response.tool_arguments:
        payload = _loads_object(response.tool_arguments)
        if payload is not None:
            return payload
        logger.warning("Function call arguments were not a JSON object, trying text content")

    if response.text:
        payload = _embedded_object(response.text)
        if payload is not None:
            return payload

    raise ExtractionFormatError("Failed to parse AI response")


def parse_response(file_type: FileType, response: ModelResponse) -> InvoiceDraft | ContractDraft:
    """Extract and validate the draft for ``file_type``.

    Raises:
        ExtractionFormatError: If no payload is found or it fails validation.
    """
    payload = extract_payload(response)
    try:
        return parse_draft(file_type, payload)
    except ValidationError as e:
        raise ExtractionFormatError(f"Extracted data did not match the {file_type.value} schema: {e}") from e
