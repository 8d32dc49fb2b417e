"""
Sprint Entity

Time-boxed iteration within a project.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from .enums import SprintStatus


class Sprint(SQLModel, table=True):
    """
    Sprint entity.

    Business Rules:
    - end_date must be after start_date
    - Lifecycle: planning -> active -> completed, cancelled from planning/active
    - At most one active sprint per project
    - Metrics are recomputed from the task set while planning/active and
      frozen afterwards
    - burndown_data holds at most one point per calendar day while the sprint
      runs, plus the closing point appended on completion
    """

    __tablename__ = "sprints"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    created_by: UUID = Field(nullable=False)

    name: str = Field(max_length=100)
    goal: Optional[str] = Field(default=None, max_length=500)

    start_date: datetime = Field(sa_column=Column(DateTime, nullable=False))
    end_date: datetime = Field(sa_column=Column(DateTime, nullable=False))
    status: SprintStatus = Field(default=SprintStatus.planning)
    capacity: int = Field(default=0, ge=0)

    # Metrics
    total_story_points: int = Field(default=0)
    completed_story_points: int = Field(default=0)
    total_tasks: int = Field(default=0)
    completed_tasks: int = Field(default=0)
    velocity: int = Field(default=0)
    burndown_data: list = Field(default_factory=list, sa_column=Column(JSON))

    retrospective: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    actual_start_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    actual_end_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_sprint_team_project_status", "team_id", "project_id", "status"),
        Index("idx_sprint_status_end", "status", "end_date"),
    )
