"""
Post Repository - Post records under ``post:<id>`` and the per-author
``user_posts:<id>`` index (newest first).
"""

from typing import List

from acwhisk.core.store import KeyValueStore
from acwhisk.models.normalizer import normalize_post
from acwhisk.models.post import Post
from acwhisk.repositories.base import BaseRepository

USER_POSTS_INDEX = "user_posts"


class PostRepository(BaseRepository[Post]):
    def __init__(self, store: KeyValueStore):
        super().__init__(store, "post", normalize_post)

    async def get_author_post_ids(self, author_id: str) -> List[str]:
        return await self.get_index(USER_POSTS_INDEX, author_id)

    async def add_to_author_index(self, author_id: str, post_id: str) -> List[str]:
        return await self.append_to_index(USER_POSTS_INDEX, author_id, post_id, prepend=True)

    async def remove_from_author_index(self, author_id: str, post_id: str) -> List[str]:
        return await self.remove_from_index(USER_POSTS_INDEX, author_id, post_id)

    async def get_author_posts(self, author_id: str) -> List[Post]:
        """Posts in index order; ids whose record is gone are skipped."""
        ids = await self.get_author_post_ids(author_id)
        found = await self.get_many(ids)
        return [found[id] for id in ids if id in found]
