"""
Newsletter Entity

Team announcement, optionally about one project.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel, Text


class Newsletter(SQLModel, table=True):
    """
    Newsletter entity.

    Business Rules:
    - Any active team member can publish
    - Only the author, a team admin or a manager can edit or delete it
    - The project, when set, must belong to the same team
    - Pinned newsletters are listed first, then newest first
    """

    __tablename__ = "newsletters"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    project_id: Optional[UUID] = Field(default=None, foreign_key="projects.id", index=True)

    title: str = Field(max_length=200)
    summary: str = Field(default="", max_length=500)
    content: str = Field(sa_column=Column(Text, nullable=False))
    tags: list = Field(default_factory=list, sa_column=Column(JSON))
    is_pinned: bool = Field(default=False, index=True)

    created_by: UUID = Field(nullable=False)
    updated_by: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_newsletter_team_created", "team_id", "created_at"),
        Index("idx_newsletter_team_project", "team_id", "project_id"),
    )
