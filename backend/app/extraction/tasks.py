"""In-process background runner for extraction jobs."""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from backend.app.extraction.errors import ExtractionError

logger = logging.getLogger(__name__)

ExtractionJob = Callable[[uuid.UUID], Awaitable[object]]


@dataclass
class ExtractionTask:
    """Handle for one scheduled extraction."""

    task_id: uuid.UUID
    document_id: uuid.UUID
    _task: asyncio.Task[bool] = field(repr=False)

    def done(self) -> bool:
        """True once the job has finished, successfully or not."""
        return self._task.done()

    async def wait(self) -> bool:
        """Wait for the job.

        Returns:
            True if extraction succeeded; failures are recorded on the document.
        """
        return await asyncio.shield(self._task)


class ExtractionTaskRunner:
    """Schedules extraction jobs as asyncio tasks.

    Running tasks are referenced until they finish so the event loop cannot
    garbage-collect them mid-flight.
    """

    def __init__(self, job: ExtractionJob) -> None:
        self._job = job
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> int:
        """Number of jobs still running."""
        return len(self._tasks)

    def enqueue(self, document_id: uuid.UUID) -> ExtractionTask:
        """Start extraction for ``document_id`` and return its handle."""
        task_id = uuid.uuid4()
        task = asyncio.create_task(self._run(document_id), name=f"extract-{document_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"Scheduled extraction task {task_id} for document {document_id}")
        return ExtractionTask(task_id=task_id, document_id=document_id, _task=task)

    async def _run(self, document_id: uuid.UUID) -> bool:
        try:
            await self._job(document_id)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for document {document_id}: {e}")
            return False
        except Exception:
            logger.exception(f"Extraction task crashed for document {document_id}")
            return False
        return True

    async def drain(self) -> None:
        """Wait for every running job; used on shutdown and in tests."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
