"""Idea model — user-submitted proposals under admin moderation."""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ideahub.database import Base


class Category(str, enum.Enum):
    TECHNOLOGY = "technology"
    BUSINESS = "business"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    ENVIRONMENT = "environment"
    OTHER = "other"


class IdeaStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Timeline(str, enum.Enum):
    IMMEDIATE = "immediate"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class Idea(Base):
    __tablename__ = "ideas"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # ── Submission ──
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Category] = mapped_column(Enum(Category), nullable=False)
    target_audience: Mapped[Optional[str]] = mapped_column(Text)
    timeline: Mapped[Optional[Timeline]] = mapped_column(Enum(Timeline))
    additional_resources: Mapped[Optional[str]] = mapped_column(Text)

    # ── Moderation ──
    status: Mapped[IdeaStatus] = mapped_column(
        Enum(IdeaStatus), default=IdeaStatus.PENDING, nullable=False, index=True
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)

    # ── AI evaluation ──
    ai_score: Mapped[Optional[int]] = mapped_column(Integer)
    ai_evaluation: Mapped[Optional[str]] = mapped_column(Text)

    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # ── Relationships ──
    author: Mapped["User"] = relationship("User", back_populates="ideas")  # noqa: F821
    votes: Mapped[List["Vote"]] = relationship(  # noqa: F821
        "Vote", back_populates="idea", passive_deletes=True
    )
