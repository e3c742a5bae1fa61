"""
Conversation schemas for request validation.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ConversationCreateRequest(BaseModel):
    """Schema for starting (or finding) a direct conversation."""

    participant_id: str = Field(..., description="The other participant")


class MessageRequest(BaseModel):
    content: str = Field(..., description="Message text")


class GroupChatCreateRequest(BaseModel):
    """Schema for group chat creation (instructors and admins)."""

    name: str = Field(..., description="Group name")
    description: Optional[str] = None
    participant_ids: List[str] = Field(default_factory=list)
