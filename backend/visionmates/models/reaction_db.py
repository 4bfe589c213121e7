from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint

from visionmates.database import Base


class ReactionDB(Base):
    """Polymorphic reaction edge; ``target_type`` names the table of ``target_id``."""

    __tablename__ = "reactions"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    target_id = Column(String, nullable=False)
    target_type = Column(String(50), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    type = Column(String(50), nullable=False, default="clap")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "target_id", "target_type", "user_id", "type", name="reactions_unique_idx"
        ),
        Index("ix_reactions_target", "target_type", "target_id"),
    )
