from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, String

from visionmates.database import Base


class ProjectLikeDB(Base):
    __tablename__ = "project_likes"

    user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    project_id = Column(String, ForeignKey("projects.id"), primary_key=True)
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True
    )


class ProjectHideDB(Base):
    __tablename__ = "project_hides"

    user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    project_id = Column(String, ForeignKey("projects.id"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
