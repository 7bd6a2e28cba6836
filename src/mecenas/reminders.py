"""Deadline reminder scheduler.

Periodically scans open deadlines and hands batches of due reminders to a
callback (e.g. a chat channel sender). Each deadline produces at most one
``reminder`` and one ``overdue`` notice per process.
"""

import asyncio
import contextlib
import inspect
import logging
import math
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from mecenas.store.base import CaseStore
from mecenas.store.models import utcnow

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0
DEFAULT_CAPACITY = 5000

SECONDS_PER_DAY = 86_400


@dataclass
class DeadlineReminder:
    """A reminder about one deadline."""

    deadline_id: str
    case_title: str
    deadline_title: str
    date: datetime
    days_left: int
    overdue: bool
    type: str


ReminderCallback = Callable[[list[DeadlineReminder]], Awaitable[Any] | Any]


class DeadlineReminderScheduler:
    """Scans deadlines on an interval and reports each due reminder once.

    The set of already-sent reminder keys lives in memory and is bounded by
    ``capacity``; the oldest keys are forgotten first. A restart therefore
    re-sends reminders that are still due.
    """

    def __init__(
        self,
        store: CaseStore,
        on_batch: ReminderCallback,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Case store to read deadlines and case titles from
            on_batch: Called with every non-empty batch (sync or async)
            interval: Seconds between scans
            capacity: Maximum number of remembered reminder keys
            clock: Current UTC time source
        """
        self.store = store
        self.on_batch = on_batch
        self.interval = interval
        self.capacity = capacity
        self._clock = clock
        self._sent: OrderedDict[str, None] = OrderedDict()
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _remember(self, key: str) -> bool:
        """Record a key; return False if it was already sent."""
        if key in self._sent:
            return False
        self._sent[key] = None
        while len(self._sent) > self.capacity:
            self._sent.popitem(last=False)
        return True

    def collect_due(self, now: datetime | None = None) -> list[DeadlineReminder]:
        """Build the batch of reminders due at ``now`` that were not sent yet."""
        now = now or self._clock()
        batch: list[DeadlineReminder] = []

        for deadline in self.store.list_deadlines(completed=False):
            if deadline.completed:
                continue

            if deadline.date < now:
                kind = "overdue"
            elif deadline.date - timedelta(days=deadline.reminder_days_before) <= now:
                kind = "reminder"
            else:
                continue

            if not self._remember(f"{deadline.id}:{kind}"):
                continue

            legal_case = self.store.get_case(deadline.case_id)
            batch.append(
                DeadlineReminder(
                    deadline_id=deadline.id,
                    case_title=legal_case.title if legal_case else deadline.case_id,
                    deadline_title=deadline.title,
                    date=deadline.date,
                    days_left=math.ceil((deadline.date - now).total_seconds() / SECONDS_PER_DAY),
                    overdue=kind == "overdue",
                    type=deadline.type,
                )
            )
        return batch

    async def check(self) -> list[DeadlineReminder]:
        """Run one scan and deliver the batch. Never raises.

        Returns:
            The delivered batch (empty if nothing was due or the scan failed)
        """
        try:
            batch = self.collect_due()
            if batch:
                result = self.on_batch(batch)
                if inspect.isawaitable(result):
                    await result
            return batch
        except Exception:
            logger.exception("Deadline reminder check failed")
            return []

    async def start(self) -> None:
        """Scan immediately, then every ``interval`` seconds in a background task."""
        if self.is_running:
            return

        async def run() -> None:
            while True:
                batch = await self.check()
                if batch:
                    logger.info("Sent %d deadline reminder(s)", len(batch))
                await asyncio.sleep(self.interval)

        self._task = asyncio.create_task(run())

    async def stop(self) -> None:
        """Stop the background task."""
        if self._task and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None


async def start_deadline_reminders(
    store: CaseStore,
    on_batch: ReminderCallback,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    capacity: int = DEFAULT_CAPACITY,
) -> Callable[[], Awaitable[None]]:
    """Start the deadline reminder scheduler.

    Args:
        store: Case store
        on_batch: Callback receiving each batch of reminders
        interval: Seconds between scans
        capacity: Maximum remembered reminder keys

    Returns:
        Async callable that stops the scheduler
    """
    scheduler = DeadlineReminderScheduler(store, on_batch, interval=interval, capacity=capacity)
    await scheduler.start()
    return scheduler.stop
