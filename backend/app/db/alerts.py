"""Alert row operations."""

import uuid
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Alert


async def insert_alerts(session: AsyncSession, alerts: list[dict[str, Any]]) -> list[Alert]:
    """Insert a batch of alerts in one commit."""
    rows = [Alert(id=uuid.uuid4(), **values) for values in alerts]
    session.add_all(rows)
    await session.commit()
    return rows


async def list_alerts(
    session: AsyncSession, ctx: RequestContext, *, unread_only: bool = False
) -> list[Alert]:
    """Alerts newest first."""
    query = select(Alert).where(Alert.user_id == ctx.user_id)
    if unread_only:
        query = query.where(Alert.is_read.is_(False))
    query = query.order_by(Alert.created_at.desc())

    result = await session.execute(query)
    return list(result.scalars().all())


async def mark_alert_read(
    session: AsyncSession, alert_id: uuid.UUID, ctx: RequestContext
) -> bool:
    """Set ``is_read``; returns False if the alert is not the caller's."""
    result = await session.execute(
        update(Alert)
        .where(Alert.id == alert_id, Alert.user_id == ctx.user_id)
        .values(is_read=True)
    )
    await session.commit()
    return result.rowcount > 0
