"""Persisted per-inspector recommendation state."""

import hashlib
import json
from dataclasses import dataclass, replace
from datetime import datetime

from app.services.recommendation.errors import StateStoreError


def recommendation_hash(text: str) -> str:
    """Content hash identifying the exact recommendation text that was dismissed."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ActorState:
    """Everything one inspector's actor remembers between invocations.

    ``last_record_ids`` and ``current_recommendation`` always describe the
    same analysis and are only ever replaced together.
    """

    last_record_ids: tuple[int, ...] = ()
    current_recommendation: str | None = None
    ignored_recommendation_hash: str | None = None
    last_analyzed_at: datetime | None = None

    @property
    def is_dismissed(self) -> bool:
        return (
            self.current_recommendation is not None
            and self.ignored_recommendation_hash is not None
            and self.ignored_recommendation_hash == recommendation_hash(self.current_recommendation)
        )

    def analyzed(self, record_ids: tuple[int, ...], recommendation: str | None, at: datetime) -> "ActorState":
        """State after a successful analysis; always clears any dismissal."""
        return ActorState(
            last_record_ids=tuple(record_ids),
            current_recommendation=recommendation,
            ignored_recommendation_hash=None,
            last_analyzed_at=at,
        )

    def dismissed(self) -> "ActorState":
        if self.current_recommendation is None:
            return self
        return replace(self, ignored_recommendation_hash=recommendation_hash(self.current_recommendation))

    # ---- Encoding ----

    def to_dict(self) -> dict:
        return {
            "lastRecordIds": list(self.last_record_ids),
            "currentRecommendation": self.current_recommendation,
            "ignoredRecommendationHash": self.ignored_recommendation_hash,
            "lastAnalyzedAt": self.last_analyzed_at.isoformat() if self.last_analyzed_at else None,
        }

    def encode(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def decode(cls, raw: bytes | str | None) -> "ActorState":
        """Rebuild state from its stored form; ``None`` yields the default state."""
        if raw is None:
            return cls()
        try:
            data = json.loads(raw)
            recommendation = data.get("currentRecommendation")
            ignored_hash = data.get("ignoredRecommendationHash")
            for name, value in (
                ("currentRecommendation", recommendation),
                ("ignoredRecommendationHash", ignored_hash),
            ):
                if value is not None and not isinstance(value, str):
                    raise TypeError(f"{name} must be a string, got {type(value).__name__}")
            analyzed_at = data.get("lastAnalyzedAt")
            return cls(
                last_record_ids=tuple(int(i) for i in data.get("lastRecordIds") or ()),
                current_recommendation=recommendation,
                ignored_recommendation_hash=ignored_hash,
                last_analyzed_at=datetime.fromisoformat(analyzed_at) if analyzed_at else None,
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise StateStoreError(f"Corrupt recommendation state: {e}") from e
