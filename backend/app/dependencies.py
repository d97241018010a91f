from fastapi import HTTPException, Request

from app.services.recommendation.registry import ActorRegistry


def get_recommendation_registry(request: Request) -> ActorRegistry:
    registry = getattr(request.app.state, "recommendation_registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Recommendation service not ready")
    return registry
