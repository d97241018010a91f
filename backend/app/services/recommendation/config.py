"""Recommendation engine configuration — single source for all thresholds."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class WindowConfig:
    """Which reports feed an analysis."""
    size: int = 2            # most recent N reports per inspector
    min_records: int = 2     # below this there is not enough context


@dataclass(frozen=True)
class InterpretationRules:
    """When an analyzer response counts as "no actionable feedback"."""
    min_length: int = 20
    affirming_phrases: tuple = ("well-written", "no improvements", "looks good")


@dataclass(frozen=True)
class LLMParams:
    """Parameters for the analyzer LLM call."""
    model_primary: str = "gpt-4o-mini"
    model_fallback: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 300
    temperature: float = 0.3


@dataclass(frozen=True)
class KeyRules:
    """Inspector key normalization."""
    max_length: int = 255
    state_prefix: str = "recommendation:"


@dataclass(frozen=True)
class RecommendationConfig:
    """Top-level config aggregating all sub-configs."""
    window: WindowConfig = field(default_factory=WindowConfig)
    interpretation: InterpretationRules = field(default_factory=InterpretationRules)
    llm: LLMParams = field(default_factory=LLMParams)
    keys: KeyRules = field(default_factory=KeyRules)
    analyzer_timeout_seconds: float = 30.0


# Default instance; callers may inject their own
recommendation_config = RecommendationConfig()
