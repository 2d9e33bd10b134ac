"""Document lifecycle models."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class FileType(str, Enum):
    """Declared document type chosen at upload."""

    invoice = "invoice"
    contract = "contract"


class DocumentStatus(str, Enum):
    """Ingestion lifecycle status."""

    processing = "processing"
    ready = "ready"
    error = "error"
    saved = "saved"


# Forward-only lifecycle; deletion (cancel) is not a status and is handled separately
ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.processing: frozenset({DocumentStatus.ready, DocumentStatus.error}),
    DocumentStatus.ready: frozenset({DocumentStatus.saved}),
    DocumentStatus.error: frozenset(),
    DocumentStatus.saved: frozenset(),
}

TERMINAL_POLL_STATUSES = frozenset({DocumentStatus.ready, DocumentStatus.error, DocumentStatus.saved})

CANCELLABLE_STATUSES = frozenset({DocumentStatus.ready, DocumentStatus.error})


class InvalidStatusTransition(ValueError):
    """Requested status change is not a forward lifecycle step."""

    def __init__(self, current: DocumentStatus, target: DocumentStatus) -> None:
        super().__init__(f"Cannot move document from {current.value} to {target.value}")
        self.current = current
        self.target = target


def can_transition(current: DocumentStatus, target: DocumentStatus) -> bool:
    """Return True if ``current -> target`` is a legal lifecycle step."""
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: DocumentStatus, target: DocumentStatus) -> None:
    """Raise InvalidStatusTransition unless ``current -> target`` is legal."""
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)


class DocumentView(BaseModel):
    """Document as returned by the API."""

    id: UUID
    user_id: UUID
    file_name: str
    file_path: str
    file_type: FileType
    status: DocumentStatus
    draft_data: dict[str, Any] | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
