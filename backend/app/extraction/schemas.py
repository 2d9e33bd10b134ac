"""Function-calling contracts and prompts for document extraction.

The tool parameter schemas are the contract the model is forced to answer
with. Their ``required`` lists must stay aligned with the required fields of
``InvoiceDraft`` / ``ContractDraft``.
"""

from typing import Any

from backend.app.models.documents import FileType

TOOL_NAME = "extract_document_data"

USER_INSTRUCTION = "Extract the structured data from this document."

INVOICE_PROMPT = """You are a document analysis AI. Extract structured data from this invoice or receipt.
Call extract_document_data with these fields:
- invoice_number: string or null
- invoice_date: date (YYYY-MM-DD) or null
- due_date: date (YYYY-MM-DD) or null
- total_amount: number or null
- tax_amount: number or null
- items: array of {description, quantity, unit_price, amount}
- summary_text: brief summary
- confidence_score: your confidence from 0 to 1
Do NOT include vendor information."""

CONTRACT_PROMPT = """You are a document analysis AI. Extract structured data from this contract.
Call extract_document_data with these fields:
- parties: array of party names involved
- start_date: contract start date (YYYY-MM-DD) or null
- end_date: contract end date (YYYY-MM-DD) or null
- payment_amount: total payment amount as a number or null
- summary_text: brief summary of the contract
- confidence_score: your confidence from 0 to 1"""

INVOICE_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "invoice_number": {"type": "string"},
        "invoice_date": {"type": "string"},
        "due_date": {"type": "string"},
        "total_amount": {"type": "number"},
        "tax_amount": {"type": "number"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "description": {"type": "string"},
                    "quantity": {"type": "number"},
                    "unit_price": {"type": "number"},
                    "amount": {"type": "number"},
                },
                "required": ["description"],
            },
        },
        "summary_text": {"type": "string"},
        "confidence_score": {"type": "number"},
    },
    "required": ["summary_text", "confidence_score"],
}

CONTRACT_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "parties": {"type": "array", "items": {"type": "string"}},
        "start_date": {"type": "string"},
        "end_date": {"type": "string"},
        "payment_amount": {"type": "number"},
        "summary_text": {"type": "string"},
        "confidence_score": {"type": "number"},
    },
    "required": ["summary_text", "confidence_score"],
}


def tool_for(file_type: FileType) -> dict[str, Any]:
    """OpenAI-style function tool declaration for the declared type."""
    parameters = CONTRACT_PARAMETERS if file_type == FileType.contract else INVOICE_PARAMETERS
    return {
        "type": "function",
        "function": {
            "name": TOOL_NAME,
            "description": "Extract structured data from the document",
            "parameters": parameters,
        },
    }


def system_prompt_for(file_type: FileType) -> str:
    """System prompt for the declared type."""
    return CONTRACT_PROMPT if file_type == FileType.contract else INVOICE_PROMPT


_IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def mime_type_for(file_name: str) -> str:
    """PDFs are sent as PDFs; unknown extensions are treated as JPEG images."""
    lowered = file_name.lower()
    if lowered.endswith(".pdf"):
        return "application/pdf"
    for suffix, mime_type in _IMAGE_MIME_TYPES.items():
        if lowered.endswith(suffix):
            return mime_type
    return "image/jpeg"
