"""
Newsletter Use Case DTOs
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


def _clean_tags(tags):
    if tags is None:
        return tags
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class CreateNewsletterCommand(BaseModel):
    title: str = Field(..., max_length=200)
    summary: str = Field(default="", max_length=500)
    content: str
    project_id: Optional[UUID] = None
    tags: List[str] = Field(default_factory=list)
    is_pinned: bool = False

    @field_validator("title", "content")
    @classmethod
    def require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("summary")
    @classmethod
    def strip_summary(cls, value: str) -> str:
        return value.strip()

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value):
        return _clean_tags(value)


class UpdateNewsletterCommand(BaseModel):
    """Partial update; project_id accepts an explicit null to detach."""

    title: Optional[str] = Field(default=None, max_length=200)
    summary: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None
    project_id: Optional[UUID] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None

    @field_validator("title", "content")
    @classmethod
    def require_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("summary")
    @classmethod
    def strip_summary(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value):
        return _clean_tags(value)
