"""
Reminder Use Cases

Both jobs are safe to run repeatedly: an existing reminder for the same
period (bandwidth) or the same day and task (overdue tasks) suppresses a
new one.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

from src.app.services.notification_bus import NotificationBus
from src.app.services.notifier import Notifier
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import NotificationType

logger = logging.getLogger(__name__)


def next_period(now: datetime) -> Tuple[int, int]:
    """(year, month) of the month after now"""
    if now.month == 12:
        return now.year + 1, 1
    return now.year, now.month + 1


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


class SendBandwidthRemindersUseCase:
    """Remind every active member without a report for next month"""

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        year, month = next_period(now)
        since = start_of_day(now).replace(day=1)
        sent = 0

        async with self.uow:
            notifier = Notifier(self.uow, self.bus)
            for team in await self.uow.teams.list_active():
                reported = set(
                    await self.uow.bandwidth_reports.list_user_ids_for_period(
                        team.id, year, month
                    )
                )
                for member in await self.uow.team_memberships.list_active(team.id):
                    if member.user_id in reported:
                        continue
                    if await self.uow.notifications.exists_since(
                        member.user_id,
                        NotificationType.bandwidth_reminder,
                        since,
                        team_id=team.id,
                    ):
                        continue
                    await notifier.notify(
                        team_id=team.id,
                        recipient_id=member.user_id,
                        actor_id=None,
                        type=NotificationType.bandwidth_reminder,
                        title="Bandwidth report due",
                        message=(
                            f"Please submit your bandwidth report for "
                            f"{year}-{month:02d} in {team.name}"
                        ),
                    )
                    sent += 1

            await self.uow.commit()
            notifier.publish()

        logger.info(f"Sent {sent} bandwidth reminders for {year}-{month:02d}")
        return sent


class SendOverdueTaskRemindersUseCase:
    """Remind assignees of incomplete tasks due today or earlier, once per task per day"""

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus

    async def execute(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        today = start_of_day(now)
        cutoff = today + timedelta(days=1) - timedelta(microseconds=1)
        sent = 0

        async with self.uow:
            notifier = Notifier(self.uow, self.bus)
            for task in await self.uow.tasks.list_overdue(cutoff):
                if await self.uow.notifications.exists_since(
                    task.assigned_to,
                    NotificationType.task_reminder,
                    today,
                    related_task_id=task.id,
                ):
                    continue
                overdue = task.due_date < today
                await notifier.notify(
                    team_id=task.team_id,
                    recipient_id=task.assigned_to,
                    actor_id=None,
                    type=NotificationType.task_reminder,
                    title="Task overdue" if overdue else "Task due today",
                    message=(
                        f'"{task.title}" was due on {task.due_date.date().isoformat()}'
                        if overdue
                        else f'"{task.title}" is due today'
                    ),
                    related_task_id=task.id,
                    related_project_id=task.project_id,
                )
                sent += 1

            await self.uow.commit()
            notifier.publish()

        logger.info(f"Sent {sent} task reminders")
        return sent
