"""Per-inspector recommendation actor.

One actor exists per inspector key. Every invocation starts from the stored
state, decides whether the stored recommendation still describes the
inspector's latest reports, regenerates it when it does not, and persists the
result before returning. The actor itself holds nothing between calls; the
registry guarantees that calls for the same key never overlap.

Decision flow for ``get_recommendation``:

    load state
      └─ undismissed recommendation stored?  → return it (no I/O)
    fetch newest N reports
      └─ fewer than the minimum?              → None (nothing written)
    compare id window with the stored window (order-sensitive)
      ├─ unchanged, already analyzed          → stored outcome, None if dismissed
      └─ changed / never analyzed             → analyze, persist, return
                                                (analysis failure → None, nothing written)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Protocol, Sequence

from app.services.recommendation.config import RecommendationConfig, recommendation_config
from app.services.recommendation.errors import AnalysisUnavailable
from app.services.recommendation.record_source import RecordSource, ReportRecord
from app.services.recommendation.state import ActorState
from app.services.recommendation.state_store import StateStore

logger = logging.getLogger(__name__)


class Analyzer(Protocol):
    async def analyze(self, records: Sequence[ReportRecord]) -> str | None:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ActorContext:
    """Capability handles shared by every actor; no actor reaches past these."""

    record_source: RecordSource
    analyzer: Analyzer
    state_store: StateStore
    config: RecommendationConfig = recommendation_config
    clock: Callable[[], datetime] = field(default=_utcnow)


class RecommendationActor:
    def __init__(self, inspector_name: str, context: ActorContext):
        self.inspector_name = inspector_name
        self._ctx = context
        self._state_key = f"{context.config.keys.state_prefix}{inspector_name}"

    # ---- State ----

    async def load_state(self) -> ActorState:
        raw = await self._ctx.state_store.get(self._state_key)
        return ActorState.decode(raw)

    async def _save_state(self, state: ActorState) -> None:
        await self._ctx.state_store.put(self._state_key, state.encode())

    # ---- Operations ----

    async def get_recommendation(self) -> str | None:
        """Current recommendation for this inspector, regenerating it if stale.

        Raises:
            SourceUnavailable: recent reports could not be read.
            StateStoreError: state could not be loaded or persisted.
        """
        state = await self.load_state()

        if state.current_recommendation is not None and state.ignored_recommendation_hash is None:
            logger.debug("Recommendation cache hit for %s", self.inspector_name)
            return state.current_recommendation

        window = self._ctx.config.window
        records = await self._ctx.record_source.fetch_recent(self.inspector_name, window.size)
        if len(records) < window.min_records:
            logger.debug(
                "Only %d reports for %s, need %d before advising",
                len(records), self.inspector_name, window.min_records,
            )
            return None

        record_ids = tuple(r.id for r in records)
        unchanged = record_ids == state.last_record_ids
        already_analyzed = state.current_recommendation is not None or state.last_analyzed_at is not None

        if unchanged and already_analyzed:
            if state.is_dismissed:
                logger.debug("Recommendation for %s dismissed, window %s unchanged", self.inspector_name, record_ids)
                return None
            return state.current_recommendation

        logger.info(
            f"Analyzing reports {list(record_ids)} for {self.inspector_name} "
            f"(previous window {list(state.last_record_ids)})"
        )
        try:
            recommendation = await self._ctx.analyzer.analyze(records)
        except AnalysisUnavailable as e:
            logger.warning(f"Analysis unavailable for {self.inspector_name}, state left untouched: {e}")
            return None

        await self._save_state(state.analyzed(record_ids, recommendation, self._ctx.clock()))
        return recommendation

    async def dismiss_recommendation(self) -> bool:
        """Suppress the current recommendation until a new analysis replaces it.

        Dismissing when there is nothing to dismiss, or dismissing twice, is a
        no-op. Always returns True once state could be loaded.
        """
        state = await self.load_state()
        if state.current_recommendation is None:
            return True

        dismissed = state.dismissed()
        if dismissed != state:
            await self._save_state(dismissed)
            logger.info("Recommendation dismissed for %s", self.inspector_name)
        return True

    async def review_draft(self, draft: ReportRecord) -> str | None:
        """Advice on an unsaved report, with this inspector's latest reports as context.

        Reads reports but never touches stored state. The draft needs no prior
        reports; analysis failure yields None.
        """
        window = self._ctx.config.window
        previous = await self._ctx.record_source.fetch_recent(self.inspector_name, window.size)
        records = [draft, *previous]

        logger.info(f"Reviewing draft for {self.inspector_name} with {len(records) - 1} previous reports")
        try:
            return await self._ctx.analyzer.analyze(records)
        except AnalysisUnavailable as e:
            logger.warning(f"Draft review unavailable for {self.inspector_name}: {e}")
            return None
