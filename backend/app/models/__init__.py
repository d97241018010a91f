from app.models.report import Report
from app.models.recommendation_state import RecommendationState

__all__ = [
    "RecommendationState",
    "Report",
]
