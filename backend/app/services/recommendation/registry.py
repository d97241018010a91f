"""Actor registry — one actor and one FIFO lock per inspector key.

Operations for the same key run strictly one at a time in arrival order
(``asyncio.Lock`` wakes waiters first-in, first-out). Operations for
different keys share nothing and run concurrently. Serialization is
per-process: run a single worker, or route each key to the same worker.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from app.services.recommendation.actor import ActorContext, RecommendationActor
from app.services.recommendation.config import RecommendationConfig
from app.services.recommendation.errors import InvalidKey
from app.services.recommendation.record_source import ReportRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_key(raw: str | None, config: RecommendationConfig) -> str:
    """Validate an inspector key before any actor is addressed."""
    if raw is None:
        raise InvalidKey("Inspector name is required")
    key = raw.strip()
    if not key:
        raise InvalidKey("Inspector name is required")
    if len(key) > config.keys.max_length:
        raise InvalidKey(f"Inspector name longer than {config.keys.max_length} characters")
    return key


@dataclass
class _Slot:
    lock: asyncio.Lock
    users: int = 0


class ActorRegistry:
    def __init__(self, context: ActorContext):
        self._ctx = context
        self._slots: dict[str, _Slot] = {}

    @property
    def active_keys(self) -> int:
        return len(self._slots)

    def actor_for(self, key: str) -> RecommendationActor:
        return RecommendationActor(key, self._ctx)

    @asynccontextmanager
    async def _exclusive(self, key: str) -> AsyncIterator[None]:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot(asyncio.Lock())
        slot.users += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.users -= 1
            if slot.users == 0:
                self._slots.pop(key, None)

    async def submit(self, raw_key: str | None, operation: Callable[[RecommendationActor], Awaitable[T]]) -> T:
        """Run ``operation`` against the key's actor once all earlier calls for it finish."""
        key = normalize_key(raw_key, self._ctx.config)
        async with self._exclusive(key):
            return await operation(self.actor_for(key))

    async def get_recommendation(self, raw_key: str | None) -> str | None:
        return await self.submit(raw_key, lambda actor: actor.get_recommendation())

    async def dismiss_recommendation(self, raw_key: str | None) -> bool:
        return await self.submit(raw_key, lambda actor: actor.dismiss_recommendation())

    async def review_draft(self, draft: ReportRecord) -> str | None:
        """Stateless draft review; skips the key's lock since no state is written."""
        key = normalize_key(draft.inspector_name, self._ctx.config)
        return await self.actor_for(key).review_draft(replace(draft, inspector_name=key))
