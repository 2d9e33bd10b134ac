"""Logging setup and structured logging for document extraction."""

import logging
import uuid
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class StructuredExtractionLogger:
    """Structured logger for extraction attempts."""

    def log_attempt(
        self,
        document_id: uuid.UUID,
        file_type: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one extraction attempt with structured data."""
        log_data: dict[str, Any] = {
            "document_id": str(document_id),
            "file_type": file_type,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Document extraction: {document_id} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
