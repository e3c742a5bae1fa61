"""
Key-value store adapters.

This provides:
1. A narrow async interface over a flat key-value namespace
2. A Redis implementation for deployments
3. An in-memory implementation for tests and local runs
4. Startup/shutdown helpers for the process-wide store

Values are arbitrary JSON-compatible records. No adapter offers cross-key
atomicity: every multi-record operation is a sequence of independent calls.
"""

import abc
import copy
import json
import logging
from typing import Any, Dict, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from acwhisk.config import settings
from acwhisk.core.exceptions import StoreError

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = "\\*?[]"


def _escape_glob(value: str) -> str:
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIALS else ch for ch in value)


class KeyValueStore(abc.ABC):
    """Interface every store backend implements."""

    async def connect(self) -> None:
        """Open connections; no-op by default."""

    async def close(self) -> None:
        """Release connections; no-op by default."""

    @abc.abstractmethod
    async def ping(self) -> bool:
        ...

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        ...

    @abc.abstractmethod
    async def set(self, key: str, value: Any) -> None:
        ...

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abc.abstractmethod
    async def scan_prefix(self, prefix: str) -> List[Any]:
        """Return every value whose key starts with ``prefix``."""


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed store.

    Values are deep-copied on the way in and out so a caller can never mutate
    stored state by holding on to a reference.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self._data[key] = copy.deepcopy(value)

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def scan_prefix(self, prefix: str) -> List[Any]:
        return [
            copy.deepcopy(value)
            for key, value in self._data.items()
            if key.startswith(prefix)
        ]


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed store.

    Records are JSON strings under ``key_prefix + key``. Any Redis failure is
    surfaced as StoreError so the API layer reports a generic internal error.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key_prefix: Optional[str] = None,
        scan_batch_size: Optional[int] = None,
    ):
        self.url = url or settings.redis_url
        self.key_prefix = settings.kv_key_prefix if key_prefix is None else key_prefix
        self.scan_batch_size = scan_batch_size or settings.kv_scan_batch_size
        self.redis_client = None
        self._connection_pool = None

    async def connect(self) -> None:
        """Establish Redis connection."""
        try:
            self._connection_pool = redis.ConnectionPool.from_url(
                self.url,
                max_connections=20,
                retry_on_timeout=True,
                decode_responses=True,
                socket_keepalive=True,
            )
            self.redis_client = redis.Redis(connection_pool=self._connection_pool)
            await self.redis_client.ping()
            logger.info("Redis key-value store connected")
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise StoreError("connect", str(e)) from e

    async def close(self) -> None:
        """Clean up Redis connections."""
        if self.redis_client:
            await self.redis_client.aclose()
        if self._connection_pool:
            await self._connection_pool.disconnect()
        self.redis_client = None
        self._connection_pool = None

    def _full_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _client(self):
        if self.redis_client is None:
            raise StoreError("client", "Redis store is not connected")
        return self.redis_client

    @staticmethod
    def _serialize(value: Any) -> str:
        return json.dumps(value)

    @staticmethod
    def _deserialize(raw: Optional[str], key: str) -> Optional[Any]:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            # Unreadable records are treated as absent; normalization fills the gap
            logger.warning(f"Discarding undecodable value for key {key}")
            return None

    async def ping(self) -> bool:
        try:
            return bool(await self._client().ping())
        except (RedisError, StoreError) as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client().get(self._full_key(key))
        except RedisError as e:
            logger.error(f"Store get error for key {key}: {e}")
            raise StoreError("get", str(e)) from e
        return self._deserialize(raw, key)

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._client().set(self._full_key(key), self._serialize(value))
        except RedisError as e:
            logger.error(f"Store set error for key {key}: {e}")
            raise StoreError("set", str(e)) from e

    async def delete(self, key: str) -> bool:
        try:
            result = await self._client().delete(self._full_key(key))
        except RedisError as e:
            logger.error(f"Store delete error for key {key}: {e}")
            raise StoreError("delete", str(e)) from e
        return result > 0

    async def scan_prefix(self, prefix: str) -> List[Any]:
        client = self._client()
        pattern = f"{_escape_glob(self._full_key(prefix))}*"
        values: List[Any] = []
        batch: List[str] = []
        try:
            async for key in client.scan_iter(match=pattern, count=self.scan_batch_size):
                batch.append(key)
                if len(batch) >= self.scan_batch_size:
                    values.extend(await self._load_batch(batch))
                    batch = []
            if batch:
                values.extend(await self._load_batch(batch))
        except RedisError as e:
            logger.error(f"Store scan error for prefix {prefix}: {e}")
            raise StoreError("scan_prefix", str(e)) from e
        return values

    async def _load_batch(self, keys: List[str]) -> List[Any]:
        raws = await self._client().mget(keys)
        loaded = []
        for key, raw in zip(keys, raws):
            value = self._deserialize(raw, key)
            # A key can vanish between SCAN and MGET
            if value is not None:
                loaded.append(value)
        return loaded


def build_store(backend: Optional[str] = None) -> KeyValueStore:
    """Create the store selected by configuration."""
    backend = (backend or settings.kv_backend).lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "redis":
        return RedisKeyValueStore()
    raise ValueError(f"Unknown key-value backend: {backend}")


# Process-wide store instance, created at startup
_store: Optional[KeyValueStore] = None


async def init_store(store: Optional[KeyValueStore] = None) -> KeyValueStore:
    """Create (unless given) and connect the process-wide store."""
    global _store
    _store = store or build_store()
    await _store.connect()
    logger.info(f"Key-value store initialized ({type(_store).__name__})")
    return _store


async def cleanup_store() -> None:
    """Close the process-wide store."""
    global _store
    if _store is not None:
        await _store.close()
        logger.info("Key-value store closed")
    _store = None


def get_store() -> KeyValueStore:
    """FastAPI dependency returning the process-wide store."""
    if _store is None:
        raise StoreError("get_store", "Key-value store is not initialized")
    return _store
