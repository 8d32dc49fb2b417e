"""
Project Entity

A unit of work inside a team, containing tasks and sprints.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import ProjectType, ProjectVisibility


class Project(SQLModel, table=True):
    """
    Project entity.

    Business Rules:
    - Always owned by exactly one team
    - current_sprint_id points at the single active sprint, if any; it is
      claimed with a conditional update so two sprints cannot both start
    - team_lead_id may manage project membership without a membership row
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)

    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default="#3B82F6", max_length=7)

    created_by: UUID = Field(nullable=False)
    team_lead_id: Optional[UUID] = Field(default=None, index=True)

    type: ProjectType = Field(default=ProjectType.kanban)
    visibility: ProjectVisibility = Field(default=ProjectVisibility.team)
    current_sprint_id: Optional[UUID] = Field(default=None)

    is_archived: bool = Field(default=False)
    archived_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    archived_by: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_project_team_archived", "team_id", "is_archived"),)
