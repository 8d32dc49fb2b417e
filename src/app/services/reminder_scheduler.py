"""
Reminder Scheduler

Runs the reminder jobs as background asyncio tasks at fixed wall clock
times (UTC): bandwidth reminders monthly, overdue task reminders daily.
A failed run is logged and the loop waits for the next slot.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import AsyncContextManager, Awaitable, Callable, List, Optional

from src.app.services.notification_bus import NotificationBus
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.reminders import (
    SendBandwidthRemindersUseCase,
    SendOverdueTaskRemindersUseCase,
)

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AsyncContextManager[UnitOfWork]]


def next_daily_run(now: datetime, hour: int) -> datetime:
    run = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if run <= now:
        run += timedelta(days=1)
    return run


def next_monthly_run(now: datetime, day: int, hour: int) -> datetime:
    """Day is clamped to 28 so every month has the slot"""
    day = max(1, min(day, 28))
    run = now.replace(day=day, hour=hour, minute=0, second=0, microsecond=0)
    if run <= now:
        if run.month == 12:
            run = run.replace(year=run.year + 1, month=1)
        else:
            run = run.replace(month=run.month + 1)
    return run


class ReminderScheduler:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        bus: Optional[NotificationBus] = None,
        bandwidth_day: int = 25,
        bandwidth_hour: int = 9,
        task_hour: int = 8,
    ):
        self.uow_factory = uow_factory
        self.bus = bus
        self.bandwidth_day = bandwidth_day
        self.bandwidth_hour = bandwidth_hour
        self.task_hour = task_hour
        self.running = False
        self._tasks: List[asyncio.Task] = []

    async def start(self):
        if self.running:
            logger.warning("Reminder scheduler already running")
            return

        self.running = True
        self._tasks = [
            asyncio.create_task(
                self._loop(
                    "bandwidth",
                    lambda now: next_monthly_run(now, self.bandwidth_day, self.bandwidth_hour),
                    self.run_bandwidth_reminders,
                )
            ),
            asyncio.create_task(
                self._loop(
                    "task",
                    lambda now: next_daily_run(now, self.task_hour),
                    self.run_task_reminders,
                )
            ),
        ]
        logger.info(
            f"Reminder scheduler started (bandwidth: day {self.bandwidth_day} "
            f"at {self.bandwidth_hour}:00, tasks: daily at {self.task_hour}:00)"
        )

    async def stop(self):
        self.running = False
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        logger.info("Reminder scheduler stopped")

    async def run_bandwidth_reminders(self) -> int:
        async with self.uow_factory() as uow:
            return await SendBandwidthRemindersUseCase(uow, self.bus).execute()

    async def run_task_reminders(self) -> int:
        async with self.uow_factory() as uow:
            return await SendOverdueTaskRemindersUseCase(uow, self.bus).execute()

    async def _loop(
        self,
        name: str,
        next_run: Callable[[datetime], datetime],
        job: Callable[[], Awaitable[int]],
    ):
        while self.running:
            now = datetime.utcnow()
            run_at = next_run(now)
            logger.debug(f"Next {name} reminder run at {run_at.isoformat()}")
            await asyncio.sleep((run_at - now).total_seconds())
            try:
                await job()
            except Exception as e:
                logger.error(f"{name} reminder run failed: {e}", exc_info=True)
