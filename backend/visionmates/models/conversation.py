from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import ApiModel, UserProfile


class Conversation(ApiModel):
    id: str
    participant1_id: str
    participant2_id: str
    last_message_at: datetime
    created_at: datetime
    updated_at: datetime

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)


class Message(ApiModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool = False
    created_at: datetime


class MessageWithSender(Message):
    sender: UserProfile | None = None


class ConversationWithMessages(Conversation):
    """Conversation with both participants and a window of messages.

    In listings ``messages`` holds only the latest message; when a single
    conversation is opened it holds the most recent messages in
    chronological order.
    """

    participant1: UserProfile | None = None
    participant2: UserProfile | None = None
    messages: list[MessageWithSender] = Field(default_factory=list)
