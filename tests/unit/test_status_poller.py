"""Unit tests for bounded status polling."""

import asyncio
import uuid

import pytest

from backend.app.db.documents import DocumentNotFoundError
from backend.app.extraction.poller import PollPolicy, PollTimeoutError, StatusPoller
from backend.app.models.documents import DocumentStatus


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _fetcher(statuses: list[str | None]):
    calls = iter(statuses)

    async def fetch(document_id: uuid.UUID) -> str | None:
        return next(calls)

    return fetch


def test_policy_intervals_back_off_to_cap() -> None:
    """Test intervals grow by the factor and stop at max_interval."""
    policy = PollPolicy(initial_interval=2.0, backoff_factor=2.0, max_interval=5.0)
    intervals = policy.intervals()

    assert [next(intervals) for _ in range(4)] == [2.0, 4.0, 5.0, 5.0]


@pytest.mark.asyncio
async def test_stops_at_ready() -> None:
    """Test polling stops at the first terminal status."""
    clock = FakeClock()
    poller = StatusPoller(
        _fetcher(["processing", "processing", "ready"]),
        policy=PollPolicy(initial_interval=1.0, backoff_factor=2.0, max_interval=10.0),
        sleep_fn=clock.sleep,
        clock=clock,
    )

    status = await poller.wait(uuid.uuid4())

    assert status == DocumentStatus.ready
    assert clock.sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_error_is_terminal() -> None:
    """Test polling stops on error without sleeping."""
    clock = FakeClock()
    poller = StatusPoller(_fetcher(["error"]), sleep_fn=clock.sleep, clock=clock)

    assert await poller.wait(uuid.uuid4()) == DocumentStatus.error
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_saved_is_terminal() -> None:
    """Test a document committed before the first check ends polling at once."""
    clock = FakeClock()
    poller = StatusPoller(_fetcher(["saved"]), sleep_fn=clock.sleep, clock=clock)

    assert await poller.wait(uuid.uuid4()) == DocumentStatus.saved
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_times_out() -> None:
    """Test PollTimeoutError once the timeout elapses."""
    clock = FakeClock()
    poller = StatusPoller(
        _fetcher(["processing"] * 100),
        policy=PollPolicy(initial_interval=2.0, backoff_factor=1.5, max_interval=10.0, timeout=30.0),
        sleep_fn=clock.sleep,
        clock=clock,
    )

    with pytest.raises(PollTimeoutError) as exc_info:
        await poller.wait(uuid.uuid4())

    assert exc_info.value.last_status == "processing"
    assert sum(clock.sleeps) == pytest.approx(30.0)


@pytest.mark.asyncio
async def test_missing_document_stops_polling() -> None:
    """Test a vanished document raises DocumentNotFoundError."""
    clock = FakeClock()
    poller = StatusPoller(_fetcher(["processing", None]), sleep_fn=clock.sleep, clock=clock)

    with pytest.raises(DocumentNotFoundError):
        await poller.wait(uuid.uuid4())


@pytest.mark.asyncio
async def test_cancellation_stops_polling() -> None:
    """Test cancelling the waiting task ends polling."""
    fetches = 0

    async def fetch(document_id: uuid.UUID) -> str:
        nonlocal fetches
        fetches += 1
        return "processing"

    poller = StatusPoller(fetch, policy=PollPolicy(initial_interval=0.01, max_interval=0.01))
    task = asyncio.create_task(poller.wait(uuid.uuid4()))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    seen = fetches
    await asyncio.sleep(0.05)
    assert fetches == seen
