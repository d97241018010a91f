from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.services.recommendation.config import recommendation_config


def _field(snake: str, camel: str, **constraints):
    return Field(
        min_length=1,
        validation_alias=AliasChoices(snake, camel),
        **constraints,
    )


class ReportCreate(BaseModel):
    """Report submission; accepts the form's camelCase keys or snake_case."""

    date_of_inspection: str = _field("date_of_inspection", "dateOfInspection")
    location: str = _field("location", "location")
    inspector_name: str = _field(
        "inspector_name", "inspectorName", max_length=recommendation_config.keys.max_length
    )
    observed_hazard: str = _field("observed_hazard", "observedHazard")
    severity_rating: str = _field("severity_rating", "severityRating")
    recommended_action: str = _field("recommended_action", "recommendedAction")

    @field_validator("inspector_name", mode="before")
    @classmethod
    def strip_inspector_name(cls, v):
        # Stored names must match the normalized recommendation key.
        return v.strip() if isinstance(v, str) else v


class ReportResponse(BaseModel):
    id: int
    date_of_inspection: str
    location: str
    inspector_name: str
    observed_hazard: str
    severity_rating: str
    recommended_action: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ReportCreatedResponse(BaseModel):
    message: str
    id: int
