"""Bounded status polling for clients waiting on extraction."""

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass

from backend.app.db.documents import DocumentNotFoundError
from backend.app.models.documents import TERMINAL_POLL_STATUSES, DocumentStatus

logger = logging.getLogger(__name__)


class PollTimeoutError(TimeoutError):
    """Document did not reach a terminal status in time."""

    def __init__(self, document_id: uuid.UUID, last_status: str | None, elapsed: float) -> None:
        super().__init__(
            f"Document {document_id} still {last_status or 'unknown'} after {elapsed:.1f}s"
        )
        self.document_id = document_id
        self.last_status = last_status
        self.elapsed = elapsed


@dataclass(frozen=True)
class PollPolicy:
    """Backoff schedule for status polling."""

    initial_interval: float = 2.0
    backoff_factor: float = 1.5
    max_interval: float = 10.0
    timeout: float = 180.0

    def intervals(self) -> Iterator[float]:
        """Yield successive sleep intervals, growing up to ``max_interval``."""
        interval = self.initial_interval
        while True:
            yield interval
            interval = min(interval * self.backoff_factor, self.max_interval)


StatusFetcher = Callable[[uuid.UUID], Awaitable[str | None]]


class StatusPoller:
    """Polls a document's status until extraction has finished.

    Cancelling the awaiting task stops polling; no background work is left behind.
    """

    def __init__(
        self,
        fetch_status: StatusFetcher,
        policy: PollPolicy | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize poller.

        Args:
            fetch_status: Returns the current status, or None if the document is gone
            policy: Backoff schedule (default: PollPolicy())
            sleep_fn: Injectable sleep function (default: asyncio.sleep)
            clock: Injectable monotonic clock (default: time.monotonic)
        """
        self._fetch_status = fetch_status
        self._policy = policy or PollPolicy()
        self._sleep = sleep_fn or asyncio.sleep
        self._clock = clock or time.monotonic

    async def wait(self, document_id: uuid.UUID) -> DocumentStatus:
        """Poll until a terminal status.

        Returns:
            ``ready`` or ``error``, or ``saved`` if the document was already committed

        Raises:
            DocumentNotFoundError: If the document no longer exists.
            PollTimeoutError: If the policy timeout elapses first.
        """
        start = self._clock()
        intervals = self._policy.intervals()

        while True:
            raw_status = await self._fetch_status(document_id)
            if raw_status is None:
                raise DocumentNotFoundError(document_id)

            status = DocumentStatus(raw_status)
            if status in TERMINAL_POLL_STATUSES:
                return status

            elapsed = self._clock() - start
            remaining = self._policy.timeout - elapsed
            if remaining <= 0:
                raise PollTimeoutError(document_id, status.value, elapsed)

            interval = next(intervals)
            logger.debug(f"Document {document_id} is {status.value}, polling again in {interval:.1f}s")
            await self._sleep(min(interval, remaining))
