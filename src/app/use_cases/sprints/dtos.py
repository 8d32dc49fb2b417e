"""
Sprint Use Case DTOs (Data Transfer Objects)

Command classes for sprint lifecycle and task movement.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.libs.timestamps import naive_utc


class CreateSprintCommand(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    goal: Optional[str] = Field(default=None, max_length=500)
    start_date: datetime
    end_date: datetime
    capacity: int = Field(default=0, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return naive_utc(value)


class UpdateSprintCommand(BaseModel):
    """Partial update; status is deliberately not updatable here"""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    goal: Optional[str] = Field(default=None, max_length=500)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity: Optional[int] = Field(default=None, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return naive_utc(value)


class CompleteSprintCommand(BaseModel):
    # None or "backlog" leaves incomplete tasks attached; otherwise a sprint id
    move_incomplete_to: Optional[str] = None


class RetrospectiveCommand(BaseModel):
    what_went_well: List[str] = Field(default_factory=list)
    what_needs_improvement: List[str] = Field(default_factory=list)
    action_items: List[str] = Field(default_factory=list)


class AddTasksToSprintCommand(BaseModel):
    task_ids: List[UUID] = Field(..., min_length=1)
