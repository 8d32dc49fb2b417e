"""
TeamMembership Entity

Links User to Team with a role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import TeamMembershipStatus, TeamRole


class TeamMembership(SQLModel, table=True):
    """
    TeamMembership entity - links User to Team with a role.

    Business Rules:
    - (team_id, user_id) must be unique
    - Only active memberships grant access
    - reporting_manager_id drives the direct-report visibility scope
    - Permission flags are derived from role on read, never stored
    - Removal is a hard delete
    """

    __tablename__ = "team_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    team_id: UUID = Field(foreign_key="teams.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    role: TeamRole = Field(default=TeamRole.member)
    status: TeamMembershipStatus = Field(default=TeamMembershipStatus.active)

    reporting_manager_id: Optional[UUID] = Field(default=None, index=True)
    custom_title: Optional[str] = Field(default=None, max_length=100)
    invited_by: Optional[UUID] = Field(default=None)

    joined_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_team_membership_team_user", "team_id", "user_id", unique=True),
        Index("idx_team_membership_team_status", "team_id", "status"),
    )
