"""
Team Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator


class TeamSettings(BaseModel):
    timezone: Optional[str] = None
    working_hours: Optional[dict] = None
    default_sprint_duration: Optional[int] = Field(default=None, ge=1, le=60)


class CreateTeamCommand(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    logo: Optional[str] = None
    settings: Optional[TeamSettings] = None


class UpdateTeamCommand(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    logo: Optional[str] = None
    settings: Optional[TeamSettings] = None


class AddTeamMemberCommand(BaseModel):
    """Identify the user by id or by email"""

    user_id: Optional[UUID] = None
    email: Optional[EmailStr] = None
    role: str = "member"
    reporting_manager_id: Optional[UUID] = None
    custom_title: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def require_user_reference(self):
        if self.user_id is None and self.email is None:
            raise ValueError("user_id or email is required")
        return self


class UpdateTeamMemberCommand(BaseModel):
    role: Optional[str] = None
    custom_title: Optional[str] = Field(default=None, max_length=100)
    reporting_manager_id: Optional[UUID] = None
