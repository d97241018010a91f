"""Error taxonomy for the recommendation core."""


class RecommendationError(Exception):
    """Base class for recommendation failures."""


class InvalidKey(RecommendationError):
    """Inspector key missing or malformed; raised before any actor is addressed."""


class SourceUnavailable(RecommendationError):
    """Recent reports could not be read."""


class AnalysisUnavailable(RecommendationError):
    """The analysis call failed or timed out."""


class StateStoreError(RecommendationError):
    """Actor state could not be loaded or persisted."""
