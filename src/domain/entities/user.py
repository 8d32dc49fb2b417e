"""
User Entity

Represents a person who can belong to multiple teams.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import SystemRole


class User(SQLModel, table=True):
    """
    User entity - a person who can belong to multiple teams.

    Business Rules:
    - Email must be unique across all users
    - Credentials live with the authentication service, not here
    - Only system admins can create teams
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=100)

    role: SystemRole = Field(default=SystemRole.user)
    reporting_manager_id: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
