"""
User Repository - Profile records under ``user:<id>``.
"""

from typing import List, Optional

from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import is_valid_uuid
from acwhisk.models.normalizer import normalize_profile
from acwhisk.models.user import UserProfile
from acwhisk.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserProfile]):
    """Profile access; every read is normalized against the requested id."""

    def __init__(self, store: KeyValueStore):
        super().__init__(store, "user", normalize_profile)

    async def get_or_default(self, user_id: str) -> UserProfile:
        """
        Get a profile, or a blank normalized one when nothing is stored.

        Used for the caller's own record, which may not have been written yet.
        """
        return normalize_profile(await self.get_raw(user_id), user_id)

    async def get_valid_users(self, limit: Optional[int] = None) -> List[UserProfile]:
        """All stored profiles that carry a valid id."""
        users = [u for u in await self.get_all() if is_valid_uuid(u.id)]
        return users[:limit] if limit is not None else users
