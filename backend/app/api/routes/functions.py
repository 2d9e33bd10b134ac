"""RPC-style endpoints - extraction and reminder sweep."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from backend.app.api.deps import ServicesDep, SessionDep
from backend.app.extraction.errors import ExtractionError
from backend.app.reminders.sweep import run_reminder_sweep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


class ProcessDocumentRequest(BaseModel):
    """Request body for POST /functions/process-document."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: uuid.UUID = Field(..., alias="documentId")


@router.post("/process-document", response_model=None)
async def process_document_rpc(
    request: ProcessDocumentRequest,
    services: ServicesDep,
) -> dict[str, Any] | JSONResponse:
    """Run extraction for one document and wait for the result.

    Returns:
        ``{"success": true, "data": {...}}`` with the stored draft, or
        ``{"error": message}`` with status 500 once the document is marked ``error``
    """
    try:
        draft = await services.process_document(request.document_id)
    except ExtractionError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return {"success": True, "data": draft.model_dump(mode="json")}


@router.post("/send-reminders", response_model=None)
async def send_reminders(
    session: SessionDep,
    services: ServicesDep,
) -> dict[str, Any] | JSONResponse:
    """Create reminder alerts for pending invoices due soon.

    Returns:
        ``{"success": true, "reminders_sent": n, "message": ...}``, or
        ``{"error": message}`` with status 500 if the alert batch could not be stored
    """
    today = datetime.now(timezone.utc).date()
    try:
        result = await run_reminder_sweep(
            session,
            services.email_sender,
            today,
            window_days=services.settings.reminder_window_days,
        )
    except SQLAlchemyError as e:
        logger.error(f"Reminder sweep failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return {"success": True, "reminders_sent": result.alerts_created, "message": result.message}
