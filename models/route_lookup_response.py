"""Model for a complete route lookup result."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .crowd_sample import CrowdSample
from .route import Route
from .timeline_entry import TimelineEntry


class SourceLink(BaseModel):
    """Display label for a grounding source."""
    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Display label, e.g. 'Source 1'")
    url: str = Field(..., description="Source URL")


class RouteLookupResponse(BaseModel):
    """Route, crowd series and derived timeline for one query."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    route: Route = Field(..., description="Validated route")
    crowd: List[CrowdSample] = Field(default_factory=list, description="Estimated crowd series")
    timeline: List[TimelineEntry] = Field(default_factory=list, description="Cumulative stop timeline")
    total_minutes: int = Field(..., alias="totalMinutes", description="Total trip duration in minutes")
    total_distance_km: float = Field(..., alias="totalDistanceKm", allow_inf_nan=False, description="Total trip distance in km")
    sources: List[SourceLink] = Field(default_factory=list, description="Labelled grounding sources")
