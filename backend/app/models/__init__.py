"""Models package - re-exports for convenience."""

from backend.app.models.documents import (
    DocumentStatus,
    DocumentView,
    FileType,
    InvalidStatusTransition,
    can_transition,
)
from backend.app.models.drafts import ContractDraft, DocumentDraft, InvoiceDraft, LineItem, parse_draft
from backend.app.models.records import (
    AlertView,
    ContractView,
    InvoiceView,
    VendorCreate,
    VendorUpdate,
    VendorView,
)
from backend.app.models.review import (
    CommitRequest,
    ContractReviewForm,
    InvoiceReviewForm,
    LineItemForm,
    VendorSelection,
    form_from_draft,
)

__all__ = [
    # Documents
    "DocumentStatus",
    "DocumentView",
    "FileType",
    "InvalidStatusTransition",
    "can_transition",
    # Drafts
    "ContractDraft",
    "DocumentDraft",
    "InvoiceDraft",
    "LineItem",
    "parse_draft",
    # Records
    "AlertView",
    "ContractView",
    "InvoiceView",
    "VendorCreate",
    "VendorUpdate",
    "VendorView",
    # Review
    "CommitRequest",
    "ContractReviewForm",
    "InvoiceReviewForm",
    "LineItemForm",
    "VendorSelection",
    "form_from_draft",
]
