"""
Notification Entity

In-app message delivered to one recipient within a team.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import NotificationType


class Notification(SQLModel, table=True):
    """
    Notification entity.

    Business Rules:
    - Never created for the actor who triggered it
    - Only the recipient can read, mark or delete it
    """

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    recipient_id: UUID = Field(nullable=False, index=True)
    actor_id: Optional[UUID] = Field(default=None)

    type: NotificationType = Field(nullable=False)
    title: str = Field(max_length=200)
    message: str = Field(max_length=500)

    related_task_id: Optional[UUID] = Field(default=None)
    related_project_id: Optional[UUID] = Field(default=None)
    related_sprint_id: Optional[UUID] = Field(default=None)
    action_url: Optional[str] = Field(default=None)

    is_read: bool = Field(default=False)
    read_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_notification_recipient_read", "recipient_id", "is_read"),
        Index("idx_notification_team_recipient", "team_id", "recipient_id"),
    )

    def to_payload(self) -> dict:
        return {
            "id": str(self.id),
            "team_id": str(self.team_id),
            "recipient_id": str(self.recipient_id),
            "actor_id": str(self.actor_id) if self.actor_id else None,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "related_task_id": str(self.related_task_id) if self.related_task_id else None,
            "related_project_id": (
                str(self.related_project_id) if self.related_project_id else None
            ),
            "related_sprint_id": (
                str(self.related_sprint_id) if self.related_sprint_id else None
            ),
            "action_url": self.action_url,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
