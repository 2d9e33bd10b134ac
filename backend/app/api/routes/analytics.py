"""Analytics endpoints - dashboard summary and spending breakdown."""

from datetime import datetime, timezone

from fastapi import APIRouter

from backend.app.analytics.aggregates import (
    DashboardSummary,
    SpendingBreakdown,
    dashboard_summary,
    spending_breakdown,
)
from backend.app.api.deps import ContextDep, SessionDep

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(ctx: ContextDep, session: SessionDep) -> DashboardSummary:
    """Invoice, pending payment, vendor and due-this-week counts."""
    return await dashboard_summary(session, ctx, datetime.now(timezone.utc).date())


@router.get("/spending", response_model=SpendingBreakdown)
async def get_spending(ctx: ContextDep, session: SessionDep) -> SpendingBreakdown:
    """Spend by vendor and by month."""
    return await spending_breakdown(session, ctx)
