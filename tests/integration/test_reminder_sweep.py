"""Integration tests for the payment reminder sweep."""

from datetime import date, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Alert
from backend.app.reminders.sweep import run_reminder_sweep
from tests.doubles import RecordingEmailSender
from tests.integration.factories import add_invoice_row, add_vendor_row

TODAY = date(2025, 3, 10)


async def _alerts(session: AsyncSession) -> list[Alert]:
    result = await session.execute(select(Alert).order_by(Alert.title))
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_window_boundaries(session: AsyncSession, ctx: RequestContext) -> None:
    """Test invoices due today through today+3 get alerts; +4 and past do not."""
    for offset in (-1, 0, 1, 3, 4):
        await add_invoice_row(
            session, ctx, due_date=TODAY + timedelta(days=offset), invoice_number=f"INV-{offset}"
        )

    result = await run_reminder_sweep(session, RecordingEmailSender(), TODAY)

    assert result.alerts_created == 3
    assert result.message == "Created 3 alerts"
    titles = sorted(alert.title for alert in await _alerts(session))
    assert titles == ["Invoice INV-0 due today", "Invoice INV-1 due in 1 day(s)", "Invoice INV-3 due in 3 day(s)"]


@pytest.mark.asyncio
async def test_alert_content(session: AsyncSession, ctx: RequestContext) -> None:
    """Test title, message and linkage of a reminder alert."""
    vendor = await add_vendor_row(session, ctx, "Acme Co")
    invoice = await add_invoice_row(
        session, ctx, due_date=TODAY + timedelta(days=2), total_amount=150, invoice_number="INV-7", vendor=vendor
    )
    sender = RecordingEmailSender()

    await run_reminder_sweep(session, sender, TODAY)

    [alert] = await _alerts(session)
    assert alert.title == "Invoice INV-7 due in 2 day(s)"
    assert alert.message == "Invoice from Acme Co for $150.00 is due on 2025-03-12."
    assert alert.type == "reminder"
    assert alert.related_invoice_id == invoice.id
    assert alert.user_id == ctx.user_id
    assert alert.is_read is False

    assert sender.sent == [
        {
            "subject": "Invoice INV-7 due in 2 day(s)",
            "html": "<p>Invoice from Acme Co for $150.00 is due on 2025-03-12.</p>"
            "<p>Please ensure timely payment to avoid late fees.</p>",
        }
    ]


@pytest.mark.asyncio
async def test_missing_number_and_vendor_fallbacks(session: AsyncSession, ctx: RequestContext) -> None:
    """Test the id prefix and Unknown Vendor fallbacks."""
    invoice = await add_invoice_row(session, ctx, due_date=TODAY, invoice_number=None, total_amount=None)

    await run_reminder_sweep(session, RecordingEmailSender(), TODAY)

    [alert] = await _alerts(session)
    assert alert.title == f"Invoice {str(invoice.id)[:8]} due today"
    assert alert.message == "Invoice from Unknown Vendor for $0.00 is due on 2025-03-10."


@pytest.mark.asyncio
async def test_paid_invoices_ignored(session: AsyncSession, ctx: RequestContext) -> None:
    """Test only pending invoices are reminded."""
    await add_invoice_row(session, ctx, due_date=TODAY, payment_status="paid")

    result = await run_reminder_sweep(session, RecordingEmailSender(), TODAY)

    assert result.alerts_created == 0
    assert await _alerts(session) == []


@pytest.mark.asyncio
async def test_email_failure_does_not_block_alerts(session: AsyncSession, ctx: RequestContext) -> None:
    """Test alerts are written even when every email fails."""
    await add_invoice_row(session, ctx, due_date=TODAY, invoice_number="INV-A")
    await add_invoice_row(session, ctx, due_date=TODAY + timedelta(days=1), invoice_number="INV-B")

    result = await run_reminder_sweep(session, RecordingEmailSender(fail=True), TODAY)

    assert result.alerts_created == 2
    assert result.email_failures == 2
    assert len(await _alerts(session)) == 2


@pytest.mark.asyncio
async def test_custom_window(session: AsyncSession, ctx: RequestContext) -> None:
    """Test the look-ahead is configurable."""
    await add_invoice_row(session, ctx, due_date=TODAY + timedelta(days=5))

    result = await run_reminder_sweep(session, RecordingEmailSender(), TODAY, window_days=7)

    assert result.alerts_created == 1
