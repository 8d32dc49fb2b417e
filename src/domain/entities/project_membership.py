"""
ProjectMembership Entity

Links User to Project with a project-scoped role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import ProjectRole


class ProjectMembership(SQLModel, table=True):
    """
    ProjectMembership entity.

    Business Rules:
    - (project_id, user_id) must be unique
    - The project creator is added as owner
    - The owner cannot be removed, and the last owner cannot be demoted
    - workload is a percentage between 0 and 100
    """

    __tablename__ = "project_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    role: ProjectRole = Field(default=ProjectRole.contributor)
    workload: int = Field(default=0, ge=0, le=100)
    added_by: Optional[UUID] = Field(default=None)

    added_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_project_membership_project_user", "project_id", "user_id", unique=True),
    )
