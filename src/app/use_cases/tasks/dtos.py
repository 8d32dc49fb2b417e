"""
Task Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.domain.entities import TaskPriority, TaskStatus, WorkItemType
from src.libs.timestamps import naive_utc


class CreateTaskCommand(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    work_item_type: WorkItemType = WorkItemType.task
    parent_task_id: Optional[UUID] = None
    sprint_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = None
    story_points: Optional[int] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None
    position: int = 0

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value):
        return naive_utc(value)


class UpdateTaskCommand(BaseModel):
    """
    Partial update. Fields left out are untouched; parent_task_id,
    sprint_id, assigned_to and due_date accept an explicit null to clear.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    work_item_type: Optional[WorkItemType] = None
    parent_task_id: Optional[UUID] = None
    sprint_id: Optional[UUID] = None
    assigned_to: Optional[UUID] = None
    story_points: Optional[int] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None
    position: Optional[int] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value):
        return naive_utc(value)


class ChangeTaskStatusCommand(BaseModel):
    status: TaskStatus
