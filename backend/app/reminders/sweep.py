"""Payment reminder sweep.

Finds pending invoices due within the next few days and raises one alert per
invoice. Email delivery is best-effort; alerts are always written.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.alerts import insert_alerts
from backend.app.db.models import InvoiceData
from backend.app.db.records import list_pending_invoices_due
from backend.app.notifications.email import EmailDeliveryError, EmailSender
from backend.app.utils.metrics import PrometheusReminderMetrics

logger = logging.getLogger(__name__)

_metrics = PrometheusReminderMetrics()


@dataclass
class SweepResult:
    """Outcome of one reminder sweep."""

    alerts_created: int
    email_failures: int = 0
    alert_ids: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        """Human-readable summary returned by the endpoint."""
        return f"Created {self.alerts_created} alerts"


def reminder_title(invoice: InvoiceData, days_until_due: int) -> str:
    """``Invoice INV-7 due in 2 day(s)`` / ``... due today``."""
    label = invoice.invoice_number or str(invoice.id)[:8]
    when = "today" if days_until_due == 0 else f"in {days_until_due} day(s)"
    return f"Invoice {label} due {when}"


def reminder_message(invoice: InvoiceData) -> str:
    """One-line body naming vendor, amount and due date."""
    vendor_name = invoice.vendor.name if invoice.vendor else "Unknown Vendor"
    total = invoice.total_amount or 0.0
    return f"Invoice from {vendor_name} for ${total:.2f} is due on {invoice.due_date}."


def reminder_html(message: str) -> str:
    """Email body for one reminder."""
    return f"<p>{message}</p><p>Please ensure timely payment to avoid late fees.</p>"


async def run_reminder_sweep(
    session: AsyncSession,
    email_sender: EmailSender,
    today: date,
    window_days: int = 3,
) -> SweepResult:
    """Create reminder alerts for pending invoices due in ``[today, today + window_days]``.

    Args:
        session: Database session
        email_sender: Sender for one email per reminder (failures are counted, not raised)
        today: Reference date (UTC)
        window_days: Inclusive look-ahead in days

    Returns:
        SweepResult with the number of alerts written

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the alert batch cannot be inserted
    """
    invoices = await list_pending_invoices_due(session, today, today + timedelta(days=window_days))
    if not invoices:
        logger.info("Reminder sweep: no invoices due")
        return SweepResult(alerts_created=0)

    pending_alerts: list[dict[str, Any]] = []
    email_failures = 0

    for invoice in invoices:
        days_until_due = (invoice.due_date - today).days  # type: ignore[operator]
        title = reminder_title(invoice, days_until_due)
        message = reminder_message(invoice)

        pending_alerts.append(
            {
                "user_id": invoice.user_id,
                "title": title,
                "message": message,
                "type": "reminder",
                "related_invoice_id": invoice.id,
            }
        )

        try:
            await email_sender.send(subject=title, html=reminder_html(message))
        except EmailDeliveryError as e:
            email_failures += 1
            _metrics.inc_email_failure()
            logger.error(f"Reminder email for invoice {invoice.id} failed: {e}")

    alerts = await insert_alerts(session, pending_alerts)
    _metrics.inc_generated(len(alerts))

    logger.info(
        f"Reminder sweep created {len(alerts)} alerts",
        extra={"structured": {"alerts_created": len(alerts), "email_failures": email_failures}},
    )
    return SweepResult(
        alerts_created=len(alerts),
        email_failures=email_failures,
        alert_ids=[str(alert.id) for alert in alerts],
    )
