"""
Team Entity

Top-level tenant: owns members, projects and everything below them.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

DEFAULT_TEAM_SETTINGS = {
    "timezone": "UTC",
    "working_hours": {"start": "09:00", "end": "17:00"},
    "default_sprint_duration": 14,
}


class Team(SQLModel, table=True):
    """
    Team entity - isolated workspace.

    Business Rules:
    - Slug is unique and derived from the name
    - Deactivated teams (is_active=False) reject every request
    - Deletion cascades to all team data
    """

    __tablename__ = "teams"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(unique=True, index=True, max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    logo: Optional[str] = Field(default=None)

    owner_id: UUID = Field(nullable=False, index=True)
    settings: dict = Field(
        default_factory=lambda: dict(DEFAULT_TEAM_SETTINGS), sa_column=Column(JSON)
    )
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_team_active", "is_active"),)
