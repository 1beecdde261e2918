"""Session storage interface and implementations.

Backs the server-side admin session slot. Redis is used when configured and
reachable; otherwise sessions live in process memory.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

T = TypeVar("T", bound=BaseModel)


class SessionStorageError(RuntimeError):
    """Raised when the storage backend cannot complete an operation."""


class SessionStorage(ABC):
    """Abstract interface for session storage backends."""

    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store a session with TTL."""

    @abstractmethod
    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve a session, or None if not found or expired."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a session."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a non-expired session exists."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Remove expired sessions; returns how many were removed."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if storage backend is available."""


class InMemorySessionStorage(SessionStorage):
    """In-memory session storage with TTL support."""

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}

    def _live_entry(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if time.time() > entry["expires_at"]:
            del self._data[key]
            return None
        return entry

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        await self.cleanup_expired()
        self._data[key] = {
            "data": value.model_dump(mode="json"),
            "expires_at": time.time() + ttl_seconds,
        }

    async def get(self, key: str, model_class: type[T]) -> T | None:
        entry = self._live_entry(key)
        if entry is None:
            return None
        try:
            return model_class.model_validate(entry["data"])
        except ValidationError:
            logger.warning("Dropping corrupted session entry {}", key)
            del self._data[key]
            return None

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def cleanup_expired(self) -> int:
        """Remove expired sessions from memory."""
        now = time.time()
        expired_keys = [key for key, entry in self._data.items() if now > entry["expires_at"]]
        for key in expired_keys:
            del self._data[key]
        return len(expired_keys)

    def is_available(self) -> bool:
        return True


class RedisSessionStorage(SessionStorage):
    """Redis-based session storage with JSON serialization."""

    def __init__(self, redis_client):
        self._redis = redis_client
        self._available = True

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value.model_dump_json())
            self._available = True
        except RedisError as e:
            self._available = False
            raise SessionStorageError(f"Redis set failed: {e}") from e

    async def get(self, key: str, model_class: type[T]) -> T | None:
        try:
            data = await self._redis.get(key)
        except RedisError as e:
            self._available = False
            raise SessionStorageError(f"Redis get failed: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return model_class.model_validate_json(data)
        except ValidationError:
            logger.warning("Dropping corrupted session entry {}", key)
            await self.delete(key)
            return None

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
            self._available = True
        except RedisError as e:
            self._available = False
            raise SessionStorageError(f"Redis delete failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            result = await self._redis.exists(key)
            self._available = True
            return bool(result)
        except RedisError as e:
            self._available = False
            raise SessionStorageError(f"Redis exists failed: {e}") from e

    async def cleanup_expired(self) -> int:
        """Redis expires keys on its own."""
        return 0

    def is_available(self) -> bool:
        return self._available

    async def ping(self) -> bool:
        """Test Redis connection health."""
        try:
            await self._redis.ping()
            self._available = True
        except RedisError:
            self._available = False
        return self._available


_storage: SessionStorage | None = None


async def _detect_redis_availability() -> SessionStorage:
    """Attempt to create Redis storage, fall back to in-memory."""
    import redis.asyncio as redis

    from src.cobalt_cms.runtime.context import get_config

    config = get_config()
    if not config.redis.enabled or not config.redis.url:
        logger.info("Session storage: Redis not configured, using in-memory storage")
        return InMemorySessionStorage()

    redis_client = redis.from_url(
        config.redis.connection_string,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    redis_storage = RedisSessionStorage(redis_client)
    if await redis_storage.ping():
        logger.info("Session storage: Redis connected")
        return redis_storage

    logger.warning("Redis unavailable, using in-memory session storage")
    return InMemorySessionStorage()


async def get_session_storage() -> SessionStorage:
    """Get the process-wide session storage instance."""
    global _storage

    if _storage is None:
        _storage = await _detect_redis_availability()

    return _storage


def _reset_storage() -> None:
    """Reset storage instance (for testing)."""
    global _storage
    _storage = None
