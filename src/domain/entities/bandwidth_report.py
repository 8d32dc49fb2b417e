"""
BandwidthReport Entity

Per-user, per-month capacity declaration.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from .enums import BandwidthStatus


class BandwidthReport(SQLModel, table=True):
    """
    BandwidthReport entity.

    Business Rules:
    - (team_id, user_id, year, month) must be unique
    - allocations: [{project_id, allocated_days, allocated_percentage}],
      the percentage is derived from available_days
    - draft -> submitted -> approved | rejected, rejected reports can be
      edited again (back to draft)
    """

    __tablename__ = "bandwidth_reports"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2020)

    total_working_days: float = Field(ge=0)
    available_days: float = Field(ge=0)
    allocations: list = Field(default_factory=list, sa_column=Column(JSON))
    planned_leave: list = Field(default_factory=list, sa_column=Column(JSON))
    notes: Optional[str] = Field(default=None, max_length=1000)

    status: BandwidthStatus = Field(default=BandwidthStatus.draft)
    submitted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    approved_by: Optional[UUID] = Field(default=None)
    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    rejection_reason: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "idx_bandwidth_team_user_period", "team_id", "user_id", "year", "month", unique=True
        ),
        Index("idx_bandwidth_team_status", "team_id", "status"),
    )
