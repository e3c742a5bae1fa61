"""
Conversation Repository - Conversation records under ``conversation:<id>``
and the per-user ``user_conversations:<id>`` index (oldest first).
"""

from typing import List, Optional

from acwhisk.core.store import KeyValueStore
from acwhisk.models.conversation import Conversation
from acwhisk.models.normalizer import normalize_conversation
from acwhisk.repositories.base import BaseRepository

USER_CONVERSATIONS_INDEX = "user_conversations"


class ConversationRepository(BaseRepository[Conversation]):
    def __init__(self, store: KeyValueStore):
        super().__init__(store, "conversation", normalize_conversation)

    async def get_user_conversation_ids(self, user_id: str) -> List[str]:
        return await self.get_index(USER_CONVERSATIONS_INDEX, user_id)

    async def add_to_user_index(self, user_id: str, conversation_id: str) -> List[str]:
        return await self.append_to_index(USER_CONVERSATIONS_INDEX, user_id, conversation_id)

    async def find_direct_between(self, user_a: str, user_b: str) -> Optional[Conversation]:
        """
        Find the direct conversation shared by two users.

        Both index lists are consulted; the first id (in ``user_a``'s order)
        present in both that resolves to a direct conversation wins.
        """
        a_ids = await self.get_user_conversation_ids(user_a)
        b_ids = set(await self.get_user_conversation_ids(user_b))
        for conversation_id in a_ids:
            if conversation_id not in b_ids:
                continue
            conversation = await self.get(conversation_id)
            if conversation is not None and conversation.is_direct:
                return conversation
        return None
