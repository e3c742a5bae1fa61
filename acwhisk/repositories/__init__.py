"""
Repository layer - Data access patterns for the application.

This module exports all repositories for easy importing:
- BaseRepository: Generic namespaced record access
- UserRepository: Profile records
- PostRepository: Posts and the per-author post index
- ConversationRepository: Conversations and the per-user conversation index
"""

from .base import BaseRepository
from .conversation_repository import ConversationRepository
from .post_repository import PostRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PostRepository",
    "ConversationRepository",
]
