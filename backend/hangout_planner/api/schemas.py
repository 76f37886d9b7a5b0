from typing import List, Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _require_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must not be empty")
    return v.strip()

# ===== GENERATION REQUEST SCHEMAS =====

class PreferenceInput(BaseModel):
    hangoutTypes: List[str] = Field(..., min_length=1, description="Activity categories, e.g. 'Eating'")
    duration: str = Field(..., description="Free-text duration label, e.g. 'Full day'")
    budget: str = Field(..., description="Free-text budget label, e.g. 'Mid-range'")

    @field_validator('hangoutTypes')
    @classmethod
    def validate_hangout_types(cls, v):
        return [_require_text(item) for item in v]

    @field_validator('duration', 'budget')
    @classmethod
    def validate_text(cls, v):
        return _require_text(v)


class LocationInput(BaseModel):
    location: str = Field(..., description="Free-text place name")
    distance: str = Field(..., description="Maximum travel distance label")
    transportation: List[str] = Field(..., description="Transportation modes")

    @field_validator('location', 'distance')
    @classmethod
    def validate_text(cls, v):
        return _require_text(v)

    @field_validator('transportation')
    @classmethod
    def validate_transportation(cls, v):
        return [item.strip() for item in v if item.strip()]


class GenerateItineraryRequest(BaseModel):
    preferences: PreferenceInput
    locationData: LocationInput

# ===== ITINERARY SCHEMAS =====

class ItineraryBody(BaseModel):
    # stored values pass through as-is; field types are not re-validated
    title: Any = None
    description: Any = None
    location: Any = None
    activities: List[Any] = Field(default_factory=list)
    recommendations: List[Any] = Field(default_factory=list)


class ItineraryRead(ItineraryBody):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    created_at: datetime = Field(..., alias="createdAt")


class SaveItineraryRequest(BaseModel):
    # validated by hand so each missing field gets its own message
    itinerary: Optional[Dict[str, Any]] = None
    userId: Optional[int] = None


class SaveItineraryResponse(BaseModel):
    id: int
    message: str
    itinerary: ItineraryBody


class MessageResponse(BaseModel):
    message: str
