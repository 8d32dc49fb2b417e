"""
Notification Use Cases

Only the recipient can see or change a notification; anybody else gets
NOTIFICATION_NOT_FOUND so ids do not leak.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.app.services.team_context import TeamContext
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Notification
from src.libs.result import Error, Result, Return

MAX_LIMIT = 100


async def _get_own(
    uow: UnitOfWork, context: TeamContext, notification_id: UUID
) -> Result[Notification]:
    notification = await uow.notifications.get(notification_id)
    if (
        notification is None
        or notification.team_id != context.team_id
        or notification.recipient_id != context.user_id
    ):
        return Return.err(Error("NOTIFICATION_NOT_FOUND", "Notification not found"))
    return Return.ok(notification)


class ListNotificationsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, unread_only: bool = False, limit: int = 50
    ) -> Result[dict]:
        limit = max(1, min(limit, MAX_LIMIT))
        async with self.uow:
            notifications = await self.uow.notifications.list_for_recipient(
                context.team_id, context.user_id, unread_only=unread_only, limit=limit
            )
            unread = await self.uow.notifications.count_unread(context.team_id, context.user_id)
            return Return.ok(
                {
                    "notifications": [n.to_payload() for n in notifications],
                    "unread_count": unread,
                }
            )


class MarkNotificationReadUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, context: TeamContext, notification_id: UUID, now: Optional[datetime] = None
    ) -> Result[dict]:
        async with self.uow:
            found = await _get_own(self.uow, context, notification_id)
            if found.is_err():
                return found
            notification = found.value

            if not notification.is_read:
                notification.is_read = True
                notification.read_at = now or datetime.utcnow()
                notification = await self.uow.notifications.update(notification)
                await self.uow.commit()

            return Return.ok(notification.to_payload())


class MarkAllNotificationsReadUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext) -> Result[dict]:
        async with self.uow:
            updated = await self.uow.notifications.mark_all_read(
                context.team_id, context.user_id, datetime.utcnow()
            )
            await self.uow.commit()
            return Return.ok({"updated": updated})


class DeleteNotificationUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: TeamContext, notification_id: UUID) -> Result[dict]:
        async with self.uow:
            found = await _get_own(self.uow, context, notification_id)
            if found.is_err():
                return found

            await self.uow.notifications.delete(found.value)
            await self.uow.commit()
            return Return.ok({"id": str(notification_id), "deleted": True})
