from __future__ import annotations

from fastapi import APIRouter, status

from visionmates.dependencies import CurrentUser, MessagingServiceDep
from visionmates.models.api import MessageCreateRequest
from visionmates.models.conversation import ConversationWithMessages, MessageWithSender

router = APIRouter(tags=["messages"])


@router.post("/messages", response_model=MessageWithSender, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreateRequest,
    service: MessagingServiceDep,
    current_user: CurrentUser,
) -> MessageWithSender:
    return await service.send_message(current_user.id, payload.recipient_id, payload.content)


@router.get("/conversations", response_model=list[ConversationWithMessages])
async def list_conversations(
    service: MessagingServiceDep,
    current_user: CurrentUser,
) -> list[ConversationWithMessages]:
    return await service.list_conversations_for_user(current_user.id)


@router.get("/conversations/{conversation_id}", response_model=ConversationWithMessages)
async def get_conversation(
    conversation_id: str,
    service: MessagingServiceDep,
    current_user: CurrentUser,
) -> ConversationWithMessages:
    """Open a conversation; the counterpart's unread messages become read."""
    return await service.get_conversation(conversation_id, current_user.id)
