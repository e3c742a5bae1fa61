# Import all models to make them available
from .conversation import (
    Conversation,
    ConversationType,
    Message,
    ParticipantRole,
    RequestStatus,
)
from .post import Comment, Post, PostPrivacy, Rating, RecipeData
from .user import UserProfile, UserRole, UserStatus

__all__ = [
    "UserProfile",
    "UserRole",
    "UserStatus",
    "Post",
    "PostPrivacy",
    "Comment",
    "Rating",
    "RecipeData",
    "Conversation",
    "ConversationType",
    "Message",
    "ParticipantRole",
    "RequestStatus",
]
