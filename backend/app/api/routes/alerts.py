"""Alert endpoints - GET /alerts, POST /alerts/{id}/read."""

import uuid
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from backend.app.api.deps import ContextDep, SessionDep
from backend.app.db.alerts import list_alerts, mark_alert_read
from backend.app.models.records import AlertView

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("", response_model=list[AlertView])
async def get_alerts(
    ctx: ContextDep,
    session: SessionDep,
    unread_only: Annotated[bool, Query()] = False,
) -> list[AlertView]:
    """Caller's alerts, newest first."""
    alerts = await list_alerts(session, ctx, unread_only=unread_only)
    return [AlertView.model_validate(a) for a in alerts]


@router.post("/{alert_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def read_alert(
    alert_id: uuid.UUID,
    ctx: ContextDep,
    session: SessionDep,
) -> None:
    """Mark an alert as read.

    Raises:
        HTTPException: 404 if the alert is missing or not the caller's
    """
    if not await mark_alert_read(session, alert_id, ctx):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Alert {alert_id} not found")
