from __future__ import annotations

from collections.abc import Iterable
from uuid import uuid4

from sqlalchemy import func, or_, select, update

from visionmates.models.conversation import Conversation, Message
from visionmates.models.message_db import ConversationDB, MessageDB
from visionmates.repositories.base import BaseRepository

_PAIR_KEY = ("participant1_id", "participant2_id")


class ConversationRepository(BaseRepository):
    """Repository for conversations and their messages."""

    def _conversation_db_to_model(self, conversation_db: ConversationDB) -> Conversation:
        return Conversation(
            id=conversation_db.id,
            participant1_id=conversation_db.participant1_id,
            participant2_id=conversation_db.participant2_id,
            last_message_at=conversation_db.last_message_at,
            created_at=conversation_db.created_at,
            updated_at=conversation_db.updated_at,
        )

    def _message_db_to_model(self, message_db: MessageDB) -> Message:
        return Message(
            id=message_db.id,
            conversation_id=message_db.conversation_id,
            sender_id=message_db.sender_id,
            content=message_db.content,
            is_read=message_db.is_read,
            created_at=message_db.created_at,
        )

    async def find_by_pair(self, participant1_id: str, participant2_id: str) -> Conversation | None:
        """Look up by the already-canonical ordered pair."""
        result = await self.session.execute(
            select(ConversationDB).where(
                ConversationDB.participant1_id == participant1_id,
                ConversationDB.participant2_id == participant2_id,
            )
        )
        conversation_db = result.scalar_one_or_none()
        return self._conversation_db_to_model(conversation_db) if conversation_db else None

    async def insert_pair(self, participant1_id: str, participant2_id: str) -> bool:
        """Create the conversation row; a concurrent insert of the same pair wins silently."""
        inserted = await self.insert_ignore(
            ConversationDB,
            {
                "id": uuid4().hex,
                "participant1_id": participant1_id,
                "participant2_id": participant2_id,
            },
            _PAIR_KEY,
        )
        await self.session.commit()
        return inserted

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        result = await self.session.execute(
            select(ConversationDB).where(ConversationDB.id == conversation_id)
        )
        conversation_db = result.scalar_one_or_none()
        return self._conversation_db_to_model(conversation_db) if conversation_db else None

    async def list_for_user(self, user_id: str) -> list[Conversation]:
        result = await self.session.execute(
            select(ConversationDB)
            .where(
                or_(
                    ConversationDB.participant1_id == user_id,
                    ConversationDB.participant2_id == user_id,
                )
            )
            .order_by(ConversationDB.last_message_at.desc(), ConversationDB.id.desc())
        )
        return [self._conversation_db_to_model(c) for c in result.scalars().all()]

    async def _next_message_sequence(self, conversation_id: str) -> int:
        result = await self.session.execute(
            select(func.max(MessageDB.sequence)).where(MessageDB.conversation_id == conversation_id)
        )
        current = result.scalar()
        return (current or 0) + 1

    async def create_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        """Append a message and bump the conversation's ``last_message_at`` to its timestamp."""
        sequence = await self._next_message_sequence(conversation_id)
        message_db = MessageDB(
            id=uuid4().hex,
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            is_read=False,
            sequence=sequence,
        )
        self.session.add(message_db)
        await self.session.flush()
        await self.session.execute(
            update(ConversationDB)
            .where(ConversationDB.id == conversation_id)
            .values(last_message_at=message_db.created_at)
        )
        await self.session.commit()
        await self.session.refresh(message_db)
        return self._message_db_to_model(message_db)

    async def message_exists(self, message_id: str) -> bool:
        result = await self.session.execute(select(MessageDB.id).where(MessageDB.id == message_id))
        return result.scalar_one_or_none() is not None

    async def list_recent_messages(self, conversation_id: str, limit: int) -> list[Message]:
        """Newest first."""
        result = await self.session.execute(
            select(MessageDB)
            .where(MessageDB.conversation_id == conversation_id)
            .order_by(MessageDB.created_at.desc(), MessageDB.sequence.desc())
            .limit(limit)
        )
        return [self._message_db_to_model(m) for m in result.scalars().all()]

    async def latest_messages(self, conversation_ids: Iterable[str]) -> dict[str, Message]:
        ids = list(conversation_ids)
        if not ids:
            return {}
        ranked = (
            select(
                MessageDB.id.label("message_id"),
                func.row_number()
                .over(
                    partition_by=MessageDB.conversation_id,
                    order_by=(MessageDB.created_at.desc(), MessageDB.sequence.desc()),
                )
                .label("rank"),
            )
            .where(MessageDB.conversation_id.in_(ids))
            .subquery()
        )
        result = await self.session.execute(
            select(MessageDB).join(ranked, MessageDB.id == ranked.c.message_id).where(ranked.c.rank == 1)
        )
        return {m.conversation_id: self._message_db_to_model(m) for m in result.scalars().all()}

    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark the counterpart's unread messages as read; the reader's own stay untouched."""
        result = await self.session.execute(
            update(MessageDB)
            .where(
                MessageDB.conversation_id == conversation_id,
                MessageDB.sender_id != reader_id,
                MessageDB.is_read.is_(False),
            )
            .values(is_read=True)
        )
        await self.session.commit()
        return result.rowcount or 0
