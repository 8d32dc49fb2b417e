"""
Project Use Case DTOs (Data Transfer Objects)
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.entities import ProjectType, ProjectVisibility

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CreateProjectCommand(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default="#3B82F6", pattern=HEX_COLOR)
    type: ProjectType = ProjectType.kanban
    visibility: ProjectVisibility = ProjectVisibility.team
    team_lead_id: Optional[UUID] = None


class UpdateProjectCommand(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    type: Optional[ProjectType] = None
    visibility: Optional[ProjectVisibility] = None
    team_lead_id: Optional[UUID] = None


class AddProjectMemberCommand(BaseModel):
    user_id: UUID
    role: str = "contributor"
    workload: int = Field(default=0, ge=0, le=100)


class BulkAddProjectMembersCommand(BaseModel):
    members: List[AddProjectMemberCommand] = Field(..., min_length=1)


class UpdateProjectMemberCommand(BaseModel):
    role: Optional[str] = None
    workload: Optional[int] = Field(default=None, ge=0, le=100)
