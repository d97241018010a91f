from pydantic import BaseModel


class RecommendationResponse(BaseModel):
    recommendation: str | None = None


class DismissRequest(BaseModel):
    inspector: str | None = None


class DismissResponse(BaseModel):
    success: bool
