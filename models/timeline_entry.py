"""Model for a derived route timeline entry."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TimelineEntry(BaseModel):
    """Cumulative travel time to a stop, derived from the route's stop list."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    stop_id: int = Field(..., alias="stopId", description="Stop identifier")
    stop_name: str = Field(..., alias="stopName", description="Stop name")
    cumulative_minutes: int = Field(..., alias="cumulativeMinutes", ge=0, description="Minutes from route start")
    leg_distance_km: float = Field(..., alias="legDistanceKm", ge=0, allow_inf_nan=False, description="Distance of the leg into this stop")
    landmark: Optional[str] = Field(default=None, description="Nearby landmark")
    is_origin: bool = Field(default=False, alias="isOrigin", description="First stop on the route")
    is_terminus: bool = Field(default=False, alias="isTerminus", description="Last stop on the route")
