from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Notification, NotificationType


class INotificationRepository(ABC):
    """Notification repository interface - application layer"""

    @abstractmethod
    async def get(self, notification_id: UUID) -> Optional[Notification]:
        pass

    @abstractmethod
    async def list_for_recipient(
        self, team_id: UUID, recipient_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """Newest first"""
        pass

    @abstractmethod
    async def count_unread(self, team_id: UUID, recipient_id: UUID) -> int:
        pass

    @abstractmethod
    async def mark_all_read(self, team_id: UUID, recipient_id: UUID, read_at: datetime) -> int:
        pass

    @abstractmethod
    async def exists_since(
        self,
        recipient_id: UUID,
        type: NotificationType,
        since: datetime,
        related_task_id: Optional[UUID] = None,
        team_id: Optional[UUID] = None,
    ) -> bool:
        """Whether a matching notification was created at or after since"""
        pass

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def update(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def delete(self, notification: Notification) -> None:
        pass

    @abstractmethod
    async def delete_by_team(self, team_id: UUID) -> int:
        pass
