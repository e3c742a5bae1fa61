"""
Conversation API endpoints.

This provides:
1. Direct conversations (get or create) and messaging
2. Message request accept / decline
3. Conversation listing
4. Group chats for instructors and admins
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from acwhisk.core.security import get_current_user
from acwhisk.dependencies import get_conversation_service
from acwhisk.schemas.common import ERROR_RESPONSES
from acwhisk.schemas.conversations import (
    ConversationCreateRequest,
    GroupChatCreateRequest,
    MessageRequest,
)
from acwhisk.services.conversation_service import ConversationService

router = APIRouter(tags=["Conversations"], responses=ERROR_RESPONSES)


@router.post("/conversations", summary="Get or create a direct conversation")
async def get_or_create_conversation(
    request: ConversationCreateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    """
    Return the caller's direct conversation with ``participant_id``.

    A new conversation between users who do not follow each other starts
    as a pending message request.
    """
    conversation = await conversations.get_or_create(
        current_user["user_id"], request.participant_id
    )
    return {"conversation": conversation.to_record()}


@router.get("/conversations", summary="List conversations")
async def list_conversations(
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    items = await conversations.list_conversations(current_user["user_id"])
    return {"conversations": items}


@router.get("/conversations/{conversation_id}/messages", summary="Get messages")
async def get_messages(
    conversation_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    conversation = await conversations.get_conversation(
        conversation_id, current_user["user_id"]
    )
    record = conversation.to_record()
    return {"conversation": record, "messages": record["messages"]}


@router.post("/conversations/{conversation_id}/messages", summary="Send message")
async def send_message(
    conversation_id: str,
    request: MessageRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    conversation = await conversations.send_message(
        conversation_id,
        current_user["user_id"],
        request.content,
        actor_name=current_user.get("name"),
    )
    return {"conversation": conversation.to_record()}


@router.post("/message-requests/{conversation_id}/accept", summary="Accept message request")
async def accept_request(
    conversation_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    conversation = await conversations.accept(conversation_id, current_user["user_id"])
    return {"success": True, "conversation": conversation.to_record()}


@router.post("/message-requests/{conversation_id}/decline", summary="Decline message request")
async def decline_request(
    conversation_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    await conversations.decline(conversation_id, current_user["user_id"])
    return {"success": True}


@router.post(
    "/group-chats",
    status_code=status.HTTP_201_CREATED,
    summary="Create group chat",
)
async def create_group_chat(
    request: GroupChatCreateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    """Create a group conversation. Instructors and admins only."""
    conversation = await conversations.create_group(
        current_user["user_id"],
        request.name,
        description=request.description,
        participant_ids=request.participant_ids,
    )
    return {"conversation_id": conversation.id, "conversation": conversation.to_record()}
