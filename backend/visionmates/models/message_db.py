from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from visionmates.database import Base


class ConversationDB(Base):
    """Direct-message thread between two users.

    Participants are stored in canonical order (``participant1_id`` sorts
    first), so the unique constraint yields one row per unordered pair.
    """

    __tablename__ = "conversations"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    participant1_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    participant2_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    last_message_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "participant1_id", "participant2_id", name="conversations_participants_idx"
        ),
        CheckConstraint("participant1_id < participant2_id", name="conversations_ordered_pair"),
    )


class MessageDB(Base):
    """Database model for direct messages."""

    __tablename__ = "messages"

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    conversation_id = Column(
        String,
        ForeignKey("conversations.id"),
        nullable=False,
        index=True,
    )
    sender_id = Column(String, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    # Tie-break for equal created_at; concurrent senders may share a value
    sequence = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_messages_thread", "conversation_id", "created_at", "sequence"),)
