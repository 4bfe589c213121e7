from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from visionmates.database import Base


class UserSkillDB(Base):
    """Skill a user claims, with a self-assessed level."""

    __tablename__ = "user_skills"

    user_id = Column(String, ForeignKey("users.id"), primary_key=True)
    skill = Column(String, primary_key=True)
    level = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)


class ProjectRequiredSkillDB(Base):
    """Skill a project is looking for, with a priority."""

    __tablename__ = "project_required_skills"

    project_id = Column(String, ForeignKey("projects.id"), primary_key=True)
    skill = Column(String, primary_key=True)
    priority = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
