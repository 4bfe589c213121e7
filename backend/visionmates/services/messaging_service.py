from __future__ import annotations

import logging

from visionmates.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from visionmates.models.conversation import (
    Conversation,
    ConversationWithMessages,
    Message,
    MessageWithSender,
)
from visionmates.models.common import UserProfile
from visionmates.repositories.conversation_repository import ConversationRepository
from visionmates.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Order two user IDs so the same unordered pair always yields the same key."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class MessagingService:
    """Direct messages between two users, one conversation per pair."""

    def __init__(
        self,
        repository: ConversationRepository,
        user_repository: UserRepository,
        max_length: int = 1000,
        message_limit: int = 50,
    ):
        self.repository = repository
        self.user_repository = user_repository
        self.max_length = max_length
        self.message_limit = message_limit

    async def get_or_create_conversation(self, user_a: str, user_b: str) -> Conversation:
        if user_a == user_b:
            raise InvalidArgumentError("Cannot send message to yourself")
        participant1_id, participant2_id = canonical_pair(user_a, user_b)

        conversation = await self.repository.find_by_pair(participant1_id, participant2_id)
        if conversation is not None:
            return conversation

        if await self.repository.insert_pair(participant1_id, participant2_id):
            logger.info(
                "conversation created",
                extra={"participant1_id": participant1_id, "participant2_id": participant2_id},
            )
        # Either our insert or a concurrent one created the row
        conversation = await self.repository.find_by_pair(participant1_id, participant2_id)
        if conversation is None:  # pragma: no cover - store lost a committed row
            raise RuntimeError("conversation missing after insert")
        return conversation

    def _validate_content(self, content: str) -> None:
        if not content or not content.strip():
            raise InvalidArgumentError("Message content is required")
        if len(content) > self.max_length:
            raise InvalidArgumentError("Message too long")

    async def send_message(
        self, sender_id: str, recipient_id: str, content: str
    ) -> MessageWithSender:
        if sender_id == recipient_id:
            raise InvalidArgumentError("Cannot send message to yourself")
        self._validate_content(content)
        if not await self.user_repository.user_exists(recipient_id):
            raise NotFoundError("Recipient not found")

        conversation = await self.get_or_create_conversation(sender_id, recipient_id)
        message = await self.repository.create_message(conversation.id, sender_id, content)
        logger.info(
            "message sent",
            extra={"conversation_id": conversation.id, "message_id": message.id},
        )
        sender = await self.user_repository.get_profile(sender_id)
        return MessageWithSender(**message.model_dump(), sender=sender)

    def _with_senders(
        self, messages: list[Message], profiles: dict[str, UserProfile]
    ) -> list[MessageWithSender]:
        return [
            MessageWithSender(**message.model_dump(), sender=profiles.get(message.sender_id))
            for message in messages
        ]

    async def list_conversations_for_user(self, user_id: str) -> list[ConversationWithMessages]:
        """Every conversation of the user with both profiles and the latest message."""
        conversations = await self.repository.list_for_user(user_id)
        latest = await self.repository.latest_messages(c.id for c in conversations)
        user_ids = {c.participant1_id for c in conversations} | {
            c.participant2_id for c in conversations
        }
        profiles = await self.user_repository.get_profiles(user_ids)

        return [
            ConversationWithMessages(
                **conversation.model_dump(),
                participant1=profiles.get(conversation.participant1_id),
                participant2=profiles.get(conversation.participant2_id),
                messages=self._with_senders(
                    [latest[conversation.id]] if conversation.id in latest else [],
                    profiles,
                ),
            )
            for conversation in conversations
        ]

    async def get_conversation(self, conversation_id: str, user_id: str) -> ConversationWithMessages:
        """Open a conversation as ``user_id``.

        Marks the other participant's unread messages as read; the viewer's
        own messages keep their state.
        """
        conversation = await self.repository.get_conversation(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        if not conversation.has_participant(user_id):
            logger.warning(
                "conversation access denied",
                extra={"conversation_id": conversation_id, "user_id": user_id},
            )
            raise ForbiddenError("Not a participant of this conversation")

        await self.repository.mark_read(conversation_id, user_id)
        recent = await self.repository.list_recent_messages(conversation_id, self.message_limit)
        recent.reverse()

        profiles = await self.user_repository.get_profiles(
            [conversation.participant1_id, conversation.participant2_id]
        )
        return ConversationWithMessages(
            **conversation.model_dump(),
            participant1=profiles.get(conversation.participant1_id),
            participant2=profiles.get(conversation.participant2_id),
            messages=self._with_senders(recent, profiles),
        )
