import logging
from typing import List, Optional
from uuid import UUID

from src.app.services.notification_bus import NotificationBus, notification_bus
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Notification, NotificationType

logger = logging.getLogger(__name__)


class Notifier:
    """
    Creates notifications inside a unit of work and publishes them on the
    bus once the transaction has been committed.
    """

    def __init__(self, uow: UnitOfWork, bus: Optional[NotificationBus] = None):
        self.uow = uow
        self.bus = bus or notification_bus
        self._pending: List[dict] = []

    async def notify(
        self,
        team_id: UUID,
        recipient_id: UUID,
        actor_id: Optional[UUID],
        type: NotificationType,
        title: str,
        message: str,
        related_task_id: Optional[UUID] = None,
        related_project_id: Optional[UUID] = None,
        related_sprint_id: Optional[UUID] = None,
        action_url: Optional[str] = None,
    ) -> Optional[Notification]:
        """Persist a notification; nobody is notified about their own actions"""
        if actor_id is not None and recipient_id == actor_id:
            return None

        notification = Notification(
            team_id=team_id,
            recipient_id=recipient_id,
            actor_id=actor_id,
            type=type,
            title=title,
            message=message,
            related_task_id=related_task_id,
            related_project_id=related_project_id,
            related_sprint_id=related_sprint_id,
            action_url=action_url,
        )
        notification = await self.uow.notifications.create(notification)
        self._pending.append(notification.to_payload())
        return notification

    def publish(self) -> int:
        """Push everything created so far to live streams; call after commit"""
        delivered = 0
        for payload in self._pending:
            delivered += self.bus.publish(
                UUID(payload["team_id"]), UUID(payload["recipient_id"]), payload
            )
        logger.debug(f"Published {len(self._pending)} notifications ({delivered} deliveries)")
        self._pending = []
        return delivered
