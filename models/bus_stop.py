"""Model for a single stop on a bus route."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BusStop(BaseModel):
    """
    Model for a single stop on a bus route.

    The first stop's distance and travel time describe the leg into the
    route's origin and may be zero. Position in the route's stop list is
    the stop order.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., strict=True, description="Stop identifier, unique within the route")
    name: str = Field(..., strict=True, min_length=1, description="Stop name")
    distance_from_previous_km: float = Field(
        ...,
        alias="distanceFromPreviousKm",
        strict=True,
        ge=0,
        allow_inf_nan=False,
        description="Distance from the previous stop in km"
    )
    typical_travel_time_minutes: int = Field(
        ...,
        alias="typicalTravelTimeMinutes",
        strict=True,
        ge=0,
        description="Typical minutes from the previous stop"
    )
    landmark: Optional[str] = Field(default=None, description="Nearby landmark, if any")

    @field_validator('landmark', mode='before')
    @classmethod
    def blank_landmark_is_none(cls, v):
        """Absent, null and blank landmarks all mean 'no landmark'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
