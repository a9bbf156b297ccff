"""Model for a resolved bus route."""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .bus_stop import BusStop

TrafficCondition = Literal["Light", "Moderate", "Heavy"]
TRAFFIC_CONDITIONS = ("Light", "Moderate", "Heavy")

# 24-hour clock, zero padded
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Route(BaseModel):
    """
    Model for a single bus line as resolved for one query.

    Field declaration order matters: validation errors are reported in this
    order, so the first missing required field is the first one listed here.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    route_id: Optional[str] = Field(default=None, alias="routeId", description="Operator route identifier")
    bus_number: str = Field(..., alias="busNumber", strict=True, min_length=1, description="Bus number or plate")
    route_name: str = Field(..., alias="routeName", strict=True, min_length=1, description="Route name")
    description: str = Field(..., strict=True, description="Short route description")
    frequency_minutes: int = Field(
        ...,
        alias="frequencyMinutes",
        strict=True,
        gt=0,
        description="Minutes between buses"
    )
    first_bus_time: str = Field(
        ...,
        alias="firstBusTime",
        strict=True,
        pattern=TIME_PATTERN,
        description="First departure (HH:MM)"
    )
    last_bus_time: str = Field(
        ...,
        alias="lastBusTime",
        strict=True,
        pattern=TIME_PATTERN,
        description="Last departure (HH:MM), same service day"
    )
    traffic_condition: TrafficCondition = Field(
        ...,
        alias="trafficCondition",
        description="Traffic assessment: Light, Moderate or Heavy"
    )
    traffic_analysis: str = Field(..., alias="trafficAnalysis", strict=True, description="Brief traffic explanation")
    stops: List[BusStop] = Field(..., min_length=1, description="Stops in route order")
    source_urls: Tuple[str, ...] = Field(
        default=(),
        alias="sourceUrls",
        description="Deduplicated grounding citation URLs"
    )

    @field_validator('last_bus_time')
    @classmethod
    def last_bus_not_before_first(cls, v: str, info: ValidationInfo) -> str:
        first = info.data.get('first_bus_time')
        # zero-padded HH:MM compares correctly as text
        if first is not None and v < first:
            raise ValueError(f"last bus {v} is before first bus {first}")
        return v

    @field_validator('stops')
    @classmethod
    def stop_ids_unique(cls, v: List[BusStop]) -> List[BusStop]:
        seen = set()
        for stop in v:
            if stop.id in seen:
                raise ValueError(f"duplicate stop id {stop.id}")
            seen.add(stop.id)
        return v

    @property
    def origin(self) -> BusStop:
        """First stop on the route."""
        return self.stops[0]

    @property
    def terminus(self) -> BusStop:
        """Last stop on the route."""
        return self.stops[-1]
