from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text

from visionmates.database import Base


class ProjectDB(Base):
    """A posted vision. Never physically removed; ``is_active`` flips instead."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    creator_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Keyset pagination for the discovery feed
    __table_args__ = (Index("ix_projects_discover", "is_active", "created_at", "id"),)


class ProgressUpdateDB(Base):
    """Timeline entry posted by a project's creator."""

    __tablename__ = "progress_updates"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)


class CommentDB(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
