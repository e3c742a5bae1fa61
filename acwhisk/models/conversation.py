"""
Conversation models - records stored under ``conversation:<id>``.

Direct conversations carry the message-request fields; group conversations
never set them and instead track ``participant_roles``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConversationType(str, Enum):
    DIRECT = "direct"
    GROUP = "group"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ParticipantRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


class Message(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    sender_id: str
    sender_name: str = ""
    content: str = ""
    created_at: str


class Conversation(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str
    type: ConversationType = ConversationType.DIRECT
    participants: List[str] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    last_message: Optional[Message] = None
    created_at: str
    created_by: Optional[str] = None

    # Direct conversations only
    request_status: Optional[RequestStatus] = None
    requested_by: Optional[str] = None
    requested_at: Optional[str] = None

    # Group conversations only
    name: Optional[str] = None
    description: Optional[str] = None
    participant_roles: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_direct(self) -> bool:
        return self.type == ConversationType.DIRECT

    @property
    def is_declined(self) -> bool:
        return self.request_status == RequestStatus.DECLINED

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: str) -> Optional[str]:
        return next((p for p in self.participants if p != user_id), None)

    def last_activity(self) -> str:
        if self.last_message is not None:
            return self.last_message.created_at
        return self.created_at

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
