from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.notification_repository import INotificationRepository
from src.domain.entities import Notification, NotificationType


class NotificationRepository(INotificationRepository):
    """Notification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, notification_id: UUID) -> Optional[Notification]:
        stmt = select(Notification).where(Notification.id == notification_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_recipient(
        self, team_id: UUID, recipient_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        stmt = select(Notification).where(
            Notification.team_id == team_id, Notification.recipient_id == recipient_id
        )
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_unread(self, team_id: UUID, recipient_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.team_id == team_id,
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def mark_all_read(self, team_id: UUID, recipient_id: UUID, read_at: datetime) -> int:
        stmt = (
            update(Notification)
            .where(
                Notification.team_id == team_id,
                Notification.recipient_id == recipient_id,
                Notification.is_read == False,  # noqa: E712
            )
            .values(is_read=True, read_at=read_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def exists_since(
        self,
        recipient_id: UUID,
        type: NotificationType,
        since: datetime,
        related_task_id: Optional[UUID] = None,
        team_id: Optional[UUID] = None,
    ) -> bool:
        stmt = select(Notification.id).where(
            Notification.recipient_id == recipient_id,
            Notification.type == type,
            Notification.created_at >= since,
        )
        if related_task_id is not None:
            stmt = stmt.where(Notification.related_task_id == related_task_id)
        if team_id is not None:
            stmt = stmt.where(Notification.team_id == team_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def create(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def update(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def delete(self, notification: Notification) -> None:
        await self.session.delete(notification)
        await self.session.flush()

    async def delete_by_team(self, team_id: UUID) -> int:
        result = await self.session.execute(
            delete(Notification).where(Notification.team_id == team_id)
        )
        return result.rowcount
