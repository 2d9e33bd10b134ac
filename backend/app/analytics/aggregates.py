"""Dashboard counters and spending aggregates.

Aggregation runs over the caller's invoice rows in Python so the same code
works on SQLite and PostgreSQL.
"""

from collections import defaultdict
from datetime import date, timedelta

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import InvoiceData, Vendor
from backend.app.db.vendors import count_vendors

UNKNOWN_VENDOR = "Unknown Vendor"


class DashboardSummary(BaseModel):
    """Headline counters for the dashboard."""

    total_invoices: int
    pending_payments: int
    vendors: int
    due_this_week: int


class SpendBucket(BaseModel):
    """Total spend for one label (vendor name or ``YYYY-MM`` month)."""

    label: str
    total: float


class SpendingBreakdown(BaseModel):
    """Spend grouped by vendor and by invoice month."""

    by_vendor: list[SpendBucket]
    by_month: list[SpendBucket]


async def dashboard_summary(
    session: AsyncSession, ctx: RequestContext, today: date, due_window_days: int = 7
) -> DashboardSummary:
    """Counts of invoices, pending payments, vendors and invoices due soon."""
    base = select(func.count()).select_from(InvoiceData).where(InvoiceData.user_id == ctx.user_id)

    total = await session.scalar(base)
    pending = await session.scalar(base.where(InvoiceData.payment_status == "pending"))
    due_soon = await session.scalar(
        base.where(
            InvoiceData.payment_status == "pending",
            InvoiceData.due_date >= today,
            InvoiceData.due_date <= today + timedelta(days=due_window_days),
        )
    )

    return DashboardSummary(
        total_invoices=int(total or 0),
        pending_payments=int(pending or 0),
        vendors=await count_vendors(session, ctx),
        due_this_week=int(due_soon or 0),
    )


async def spending_breakdown(session: AsyncSession, ctx: RequestContext) -> SpendingBreakdown:
    """Sum ``total_amount`` per vendor (largest first) and per month (chronological)."""
    result = await session.execute(
        select(Vendor.name, InvoiceData.invoice_date, InvoiceData.total_amount)
        .select_from(InvoiceData)
        .outerjoin(Vendor, InvoiceData.vendor_id == Vendor.id)
        .where(InvoiceData.user_id == ctx.user_id)
    )

    by_vendor: dict[str, float] = defaultdict(float)
    by_month: dict[str, float] = defaultdict(float)

    for vendor_name, invoice_date, total_amount in result.all():
        amount = float(total_amount or 0)
        by_vendor[vendor_name or UNKNOWN_VENDOR] += amount
        if invoice_date is not None:
            by_month[invoice_date.isoformat()[:7]] += amount

    return SpendingBreakdown(
        by_vendor=[
            SpendBucket(label=label, total=round(total, 2))
            for label, total in sorted(by_vendor.items(), key=lambda kv: (-kv[1], kv[0]))
        ],
        by_month=[SpendBucket(label=label, total=round(total, 2)) for label, total in sorted(by_month.items())],
    )
