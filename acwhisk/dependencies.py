"""
FastAPI dependencies for dependency injection.

This provides:
1. Service layer dependency injection over the process-wide store
"""

from fastapi import Depends

from acwhisk.core.store import KeyValueStore, get_store
from acwhisk.services.conversation_service import ConversationService
from acwhisk.services.interaction_service import InteractionService
from acwhisk.services.post_service import PostService
from acwhisk.services.profile_service import ProfileService
from acwhisk.services.social_graph_service import SocialGraphService


# Service Dependencies
def get_profile_service(store: KeyValueStore = Depends(get_store)) -> ProfileService:
    """Get ProfileService instance with the key-value store."""
    return ProfileService(store)


def get_social_graph_service(store: KeyValueStore = Depends(get_store)) -> SocialGraphService:
    """Get SocialGraphService instance with the key-value store."""
    return SocialGraphService(store)


def get_post_service(store: KeyValueStore = Depends(get_store)) -> PostService:
    """Get PostService instance with the key-value store."""
    return PostService(store)


def get_interaction_service(store: KeyValueStore = Depends(get_store)) -> InteractionService:
    """Get InteractionService instance with the key-value store."""
    return InteractionService(store)


def get_conversation_service(store: KeyValueStore = Depends(get_store)) -> ConversationService:
    """Get ConversationService instance with the key-value store."""
    return ConversationService(store)

