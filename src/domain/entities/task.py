"""
Task Entity

A work item inside a project; sprint_id=None means it is not in any sprint.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import TaskPriority, TaskStatus, WorkItemType


class Task(SQLModel, table=True):
    """
    Task entity.

    Business Rules:
    - completed_at is set exactly when status is in the completed category
    - parent_task_id must point at a higher-ranked item in the same project
    - subtasks always have a parent
    - sprint_id is the only link between a task and a sprint
    """

    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    sprint_id: Optional[UUID] = Field(default=None, index=True)

    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.todo)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    work_item_type: WorkItemType = Field(default=WorkItemType.task)
    parent_task_id: Optional[UUID] = Field(default=None, index=True)

    assigned_to: Optional[UUID] = Field(default=None, index=True)
    assigned_by: Optional[UUID] = Field(default=None)
    created_by: UUID = Field(nullable=False)

    story_points: Optional[int] = Field(default=None, ge=0)
    position: int = Field(default=0)

    due_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_task_team_project_status", "team_id", "project_id", "status"),
        Index("idx_task_sprint_status", "sprint_id", "status"),
    )
