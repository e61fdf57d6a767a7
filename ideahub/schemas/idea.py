"""Idea Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ideahub.models.idea import Category, IdeaStatus, Timeline
from ideahub.schemas.base import ApiModel
from ideahub.schemas.user import AuthorAdminOut, AuthorOut


class IdeaFields(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category: Category
    target_audience: Optional[str] = None
    timeline: Optional[Timeline] = None
    additional_resources: Optional[str] = None


class IdeaCreate(IdeaFields):
    request_ai_evaluation: bool = False


class IdeaUpdate(ApiModel):
    """Partial update; only fields present in the body are applied."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[Category] = None
    target_audience: Optional[str] = None
    timeline: Optional[Timeline] = None
    additional_resources: Optional[str] = None

    @field_validator("title", "description", "category")
    @classmethod
    def _required_when_present(cls, value):
        # May be omitted, but never cleared.
        if value is None:
            raise ValueError("may not be null")
        return value


class IdeaOut(IdeaFields):
    id: int
    status: IdeaStatus
    ai_score: Optional[int] = None
    ai_evaluation: Optional[str] = None
    rejection_reason: Optional[str] = None
    author_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IdeaDetailOut(IdeaOut):
    author: AuthorOut
    upvotes: int = 0
    downvotes: int = 0


class IdeaSummaryOut(ApiModel):
    """Row of the public approved-ideas feed."""
    id: int
    title: str
    description: str
    category: Category
    ai_score: Optional[int] = None
    created_at: Optional[datetime] = None
    author: AuthorOut
    upvotes: int = 0
    downvotes: int = 0


class IdeaAdminOut(ApiModel):
    id: int
    title: str
    description: str
    category: Category
    status: IdeaStatus
    ai_score: Optional[int] = None
    created_at: Optional[datetime] = None
    author: AuthorAdminOut


class RejectRequest(ApiModel):
    reason: Optional[str] = None
