"""Run the payment reminder sweep once (for cron / scheduled jobs)."""

import argparse
import asyncio
from datetime import date, datetime, timezone

from backend.app.config import get_settings
from backend.app.db.engine import create_async_engine_from_settings, create_session_factory
from backend.app.reminders.sweep import run_reminder_sweep
from backend.app.services import build_email_sender
from backend.app.utils.logging import configure_logging


async def sweep(today: date) -> None:
    """Run one sweep against the configured database."""
    settings = get_settings()
    configure_logging(settings.log_level)

    engine = create_async_engine_from_settings(settings)
    session_factory = create_session_factory(engine)
    try:
        async with session_factory() as session:
            result = await run_reminder_sweep(
                session,
                build_email_sender(settings),
                today,
                window_days=settings.reminder_window_days,
            )
    finally:
        await engine.dispose()

    print(f"{result.message} ({result.email_failures} email failures)")


def main() -> None:
    """Parse arguments and run the sweep."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD); defaults to today in UTC",
    )
    args = parser.parse_args()
    asyncio.run(sweep(args.today or datetime.now(timezone.utc).date()))


if __name__ == "__main__":
    main()
