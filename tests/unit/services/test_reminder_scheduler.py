from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from src.app.services.reminder_scheduler import (
    ReminderScheduler,
    next_daily_run,
    next_monthly_run,
)


def test_next_daily_run_same_day_before_hour():
    assert next_daily_run(datetime(2026, 5, 10, 6, 30), 8) == datetime(2026, 5, 10, 8, 0)


def test_next_daily_run_rolls_to_tomorrow():
    assert next_daily_run(datetime(2026, 5, 10, 8, 0), 8) == datetime(2026, 5, 11, 8, 0)
    assert next_daily_run(datetime(2026, 5, 31, 23, 0), 8) == datetime(2026, 6, 1, 8, 0)


def test_next_monthly_run():
    assert next_monthly_run(datetime(2026, 5, 3), 25, 9) == datetime(2026, 5, 25, 9, 0)
    assert next_monthly_run(datetime(2026, 5, 25, 10), 25, 9) == datetime(2026, 6, 25, 9, 0)
    assert next_monthly_run(datetime(2026, 12, 26), 25, 9) == datetime(2027, 1, 25, 9, 0)


def test_next_monthly_run_clamps_day():
    assert next_monthly_run(datetime(2026, 2, 1), 31, 9) == datetime(2026, 2, 28, 9, 0)


@pytest.mark.asyncio
async def test_run_bandwidth_reminders_uses_fresh_unit_of_work(mock_uow):
    opened = []

    @asynccontextmanager
    async def factory():
        opened.append(mock_uow)
        yield mock_uow

    scheduler = ReminderScheduler(factory)
    with patch(
        "src.app.services.reminder_scheduler.SendBandwidthRemindersUseCase"
    ) as use_case:
        use_case.return_value.execute = AsyncMock(return_value=3)
        sent = await scheduler.run_bandwidth_reminders()

    assert sent == 3
    assert opened == [mock_uow]
    use_case.assert_called_once_with(mock_uow, None)


@pytest.mark.asyncio
async def test_start_and_stop_cancel_loops(mock_uow):
    @asynccontextmanager
    async def factory():
        yield mock_uow

    scheduler = ReminderScheduler(factory)
    await scheduler.start()
    assert scheduler.running
    assert len(scheduler._tasks) == 2

    await scheduler.stop()
    assert not scheduler.running
    assert scheduler._tasks == []
