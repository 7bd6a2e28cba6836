"""Tests for the deadline reminder scheduler."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from mecenas.reminders import DeadlineReminderScheduler, start_deadline_reminders

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def add_deadline(store, case_id, days_from_now, title="Termin", reminder_days=3, completed=False):
    return store.create_deadline(
        case_id=case_id,
        title=title,
        date=NOW + timedelta(days=days_from_now),
        type="procesowy",
        reminder_days_before=reminder_days,
        completed=completed,
    )


@pytest.fixture
def case_id(client_and_case):
    return client_and_case[1].id


class TestCollectDue:
    def test_reminder_and_overdue(self, store, case_id):
        add_deadline(store, case_id, 2, title="Odpowiedź na pozew")
        add_deadline(store, case_id, -1, title="Apelacja")
        add_deadline(store, case_id, 10, title="Daleko")
        add_deadline(store, case_id, 1, title="Zrobione", completed=True)
        scheduler = DeadlineReminderScheduler(store, MagicMock(), clock=lambda: NOW)

        batch = scheduler.collect_due()

        by_title = {r.deadline_title: r for r in batch}
        assert set(by_title) == {"Odpowiedź na pozew", "Apelacja"}
        assert by_title["Apelacja"].overdue
        assert not by_title["Odpowiedź na pozew"].overdue
        assert by_title["Odpowiedź na pozew"].days_left == 2
        assert by_title["Odpowiedź na pozew"].case_title == "Kowalski przeciwko Bankowi"

    def test_partial_day_rounds_up(self, store, case_id):
        store.create_deadline(case_id=case_id, title="T", date=NOW + timedelta(hours=30), type="procesowy")
        scheduler = DeadlineReminderScheduler(store, MagicMock(), clock=lambda: NOW)
        assert scheduler.collect_due()[0].days_left == 2

    def test_each_kind_sent_once(self, store, case_id):
        deadline = add_deadline(store, case_id, 1)
        scheduler = DeadlineReminderScheduler(store, MagicMock(), clock=lambda: NOW)

        assert len(scheduler.collect_due()) == 1
        assert scheduler.collect_due() == []

        # Once the date passes the overdue notice is still sent
        overdue = scheduler.collect_due(now=deadline.date + timedelta(minutes=1))
        assert [r.overdue for r in overdue] == [True]

    def test_missing_case_uses_case_id(self, store):
        store.create_deadline(case_id="orphan", title="T", date=NOW - timedelta(days=1), type="procesowy")
        scheduler = DeadlineReminderScheduler(store, MagicMock(), clock=lambda: NOW)
        assert scheduler.collect_due()[0].case_title == "orphan"

    def test_capacity_forgets_oldest(self, store):
        scheduler = DeadlineReminderScheduler(store, MagicMock(), capacity=2)

        assert scheduler._remember("a:overdue")
        assert scheduler._remember("b:overdue")
        assert scheduler._remember("c:overdue")

        assert not scheduler._remember("c:overdue")
        assert not scheduler._remember("b:overdue")
        assert scheduler._remember("a:overdue")


class TestCheck:
    @pytest.mark.asyncio
    async def test_async_callback_receives_batch(self, store, case_id):
        add_deadline(store, case_id, 1)
        callback = AsyncMock()
        scheduler = DeadlineReminderScheduler(store, callback, clock=lambda: NOW)

        batch = await scheduler.check()

        callback.assert_awaited_once_with(batch)

    @pytest.mark.asyncio
    async def test_empty_batch_skips_callback(self, store):
        callback = MagicMock()
        scheduler = DeadlineReminderScheduler(store, callback, clock=lambda: NOW)

        assert await scheduler.check() == []
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_callback_error_is_logged(self, store, case_id, caplog):
        add_deadline(store, case_id, 1)
        scheduler = DeadlineReminderScheduler(store, MagicMock(side_effect=RuntimeError("send failed")), clock=lambda: NOW)

        with caplog.at_level(logging.ERROR, logger="mecenas.reminders"):
            assert await scheduler.check() == []

        assert "Deadline reminder check failed" in caplog.text


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_scans_immediately_and_stops(self, store, case_id):
        store.create_deadline(
            case_id=case_id, title="Apelacja", date=datetime.now(UTC) - timedelta(days=1), type="procesowy"
        )
        received = []

        stop = await start_deadline_reminders(store, received.extend, interval=3600)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        await stop()

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, store):
        scheduler = DeadlineReminderScheduler(store, MagicMock(), interval=3600)
        await scheduler.start()
        task = scheduler._task
        await scheduler.start()

        assert scheduler._task is task
        assert scheduler.is_running

        await scheduler.stop()
        assert not scheduler.is_running
