"""
Base Repository - Generic record access over the key-value store.

This provides:
1. Namespaced keys of the form ``<entity>:<id>``
2. Normalization of every record on read
3. Ordered id-list indexes (``user_posts:<id>``, ``user_conversations:<id>``)
4. A consistent interface across all repositories

There is no transaction support: each call is one independent store operation.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from acwhisk.core.store import KeyValueStore
from acwhisk.models.normalizer import normalize_id_list

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for one entity namespace.

    Specific repositories pass their key prefix and normalizer; all reads go
    through the normalizer so callers never see a partial record.
    """

    def __init__(
        self,
        store: KeyValueStore,
        entity: str,
        normalizer: Callable[[Any, Optional[str]], ModelType],
    ):
        """
        Initialize repository with store and entity namespace.

        Args:
            store: Key-value store adapter
            entity: Key namespace, e.g. "user" or "post"
            normalizer: Total function turning a raw record into a model
        """
        self.store = store
        self.entity = entity
        self.normalizer = normalizer

    def key(self, id: str) -> str:
        return f"{self.entity}:{id}"

    async def get_raw(self, id: str) -> Optional[Any]:
        return await self.store.get(self.key(id))

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Returns:
            Normalized model or None if no record is stored
        """
        raw = await self.get_raw(id)
        if raw is None:
            return None
        return self.normalizer(raw, id)

    async def exists(self, id: str) -> bool:
        return await self.get_raw(id) is not None

    async def save(self, obj: ModelType) -> ModelType:
        """Write the whole record back under its id."""
        await self.store.set(self.key(obj.id), obj.model_dump(mode="json"))
        return obj

    async def delete(self, id: str) -> bool:
        return await self.store.delete(self.key(id))

    async def get_all(self) -> List[ModelType]:
        """Prefix-scan the namespace and normalize every record."""
        records = await self.store.scan_prefix(f"{self.entity}:")
        return [self.normalizer(raw, None) for raw in records if raw is not None]

    # Index helpers

    async def get_index(self, index: str, owner_id: str) -> List[str]:
        return normalize_id_list(await self.store.get(f"{index}:{owner_id}"))

    async def set_index(self, index: str, owner_id: str, ids: List[str]) -> None:
        await self.store.set(f"{index}:{owner_id}", list(ids))

    async def append_to_index(
        self, index: str, owner_id: str, id: str, prepend: bool = False
    ) -> List[str]:
        ids = await self.get_index(index, owner_id)
        if id not in ids:
            if prepend:
                ids.insert(0, id)
            else:
                ids.append(id)
            await self.set_index(index, owner_id, ids)
        return ids

    async def remove_from_index(self, index: str, owner_id: str, id: str) -> List[str]:
        ids = await self.get_index(index, owner_id)
        remaining = [existing for existing in ids if existing != id]
        if len(remaining) != len(ids):
            await self.set_index(index, owner_id, remaining)
        return remaining

    async def get_many(self, ids: List[str]) -> Dict[str, ModelType]:
        """Fetch several records by id, skipping ids with no stored record."""
        found: Dict[str, ModelType] = {}
        for id in ids:
            obj = await self.get(id)
            if obj is not None:
                found[id] = obj
        return found
