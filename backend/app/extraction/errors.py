"""Extraction failure taxonomy."""


class ExtractionError(Exception):
    """Extraction of a document failed; the document is moved to ``error``."""

    reason = "extraction_error"


class DocumentFetchError(ExtractionError):
    """Document row missing or not in a processable state."""

    reason = "document_fetch"


class DownloadError(ExtractionError):
    """Stored file could not be read."""

    reason = "download"


class ModelCallError(ExtractionError):
    """Model endpoint unreachable or returned an error status."""

    reason = "model_call"


class ExtractionFormatError(ExtractionError):
    """Model returned neither a function call nor parseable embedded JSON."""

    reason = "format"
