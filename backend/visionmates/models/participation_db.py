from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from visionmates.database import Base


class ParticipationDB(Base):
    """Participation signal of a user on a project.

    The unique constraint covers the full (project, user, type) triple. Holding
    only one type per (project, user) is enforced by the participation service.
    """

    __tablename__ = "participations"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", "type", name="participations_unique_idx"),
    )
