"""Durable key-value storage for actor state.

Each inspector key owns exactly one entry; only that inspector's actor reads
or writes it. A failing store is never treated as a miss; errors surface as
``StateStoreError``.
"""

import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.recommendation_state import RecommendationState
from app.services.recommendation.errors import StateStoreError

logger = logging.getLogger(__name__)


class StateStore(ABC):
    """get/put of one opaque serialized record per key."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        ...

    @abstractmethod
    async def put(self, key: str, value: bytes) -> None:
        ...

    async def close(self) -> None:
        return None


class InMemoryStateStore(StateStore):
    """Process-local store for development and tests."""

    def __init__(self):
        self._data: dict[str, bytes] = {}

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def put(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class RedisStateStore(StateStore):
    """Redis-backed store. Entries carry no TTL."""

    def __init__(self, redis_url: str | None = None, client: redis.Redis | None = None):
        self._redis_url = redis_url
        self._redis: redis.Redis | None = client

    def _get_redis(self) -> redis.Redis:
        if self._redis is None:
            self._redis = redis.from_url(self._redis_url, decode_responses=False)
        return self._redis

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._get_redis().get(key)
        except RedisError as e:
            logger.error(f"Redis state read failed for {key}: {e}")
            raise StateStoreError(f"State read failed: {e}") from e

    async def put(self, key: str, value: bytes) -> None:
        try:
            await self._get_redis().set(key, value)
        except RedisError as e:
            logger.error(f"Redis state write failed for {key}: {e}")
            raise StateStoreError(f"State write failed: {e}") from e

    async def close(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None


class DatabaseStateStore(StateStore):
    """Stores state rows in the ``recommendation_states`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> bytes | None:
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(RecommendationState.payload).where(RecommendationState.key == key)
                )
                payload = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database state read failed for {key}: {e}")
            raise StateStoreError(f"State read failed: {e}") from e
        return payload.encode("utf-8") if payload is not None else None

    async def put(self, key: str, value: bytes) -> None:
        payload = value.decode("utf-8")
        try:
            async with self._session_factory() as db:
                existing = await db.execute(
                    select(RecommendationState).where(RecommendationState.key == key)
                )
                row = existing.scalar_one_or_none()
                if row:
                    row.payload = payload
                else:
                    db.add(RecommendationState(key=key, payload=payload))
                await db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database state write failed for {key}: {e}")
            raise StateStoreError(f"State write failed: {e}") from e
