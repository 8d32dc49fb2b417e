"""
Bandwidth Report DTOs
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class AllocationItem(BaseModel):
    project_id: UUID
    allocated_days: float = Field(..., ge=0)


class PlannedLeave(BaseModel):
    start_date: date
    end_date: date
    days: float = Field(..., ge=0)
    reason: Optional[str] = Field(default=None, max_length=200)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CreateBandwidthReportCommand(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2020)
    total_working_days: float = Field(..., ge=0)
    available_days: float = Field(..., ge=0)
    allocations: List[AllocationItem] = Field(default_factory=list)
    planned_leave: List[PlannedLeave] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class UpdateBandwidthReportCommand(BaseModel):
    total_working_days: Optional[float] = Field(default=None, ge=0)
    available_days: Optional[float] = Field(default=None, ge=0)
    allocations: Optional[List[AllocationItem]] = None
    planned_leave: Optional[List[PlannedLeave]] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class RejectBandwidthReportCommand(BaseModel):
    reason: str = Field(..., max_length=1000)
