"""Derived timeline values for a route's ordered stop list."""

from typing import List, Sequence

from models import BusStop, TimelineEntry


def build_timeline(stops: Sequence[BusStop]) -> List[TimelineEntry]:
    """
    Cumulative minutes to each stop.

    Entry i holds the sum of typical travel times for stops 0..i, so the
    origin's own inbound leg is included (usually zero).

    Raises:
        ValueError: If there are no stops. Validated routes always have one.
    """
    if not stops:
        raise ValueError("Cannot build a timeline for a route with no stops")

    entries = []
    cumulative = 0
    last = len(stops) - 1
    for index, stop in enumerate(stops):
        cumulative += stop.typical_travel_time_minutes
        entries.append(TimelineEntry(
            stop_id=stop.id,
            stop_name=stop.name,
            cumulative_minutes=cumulative,
            leg_distance_km=stop.distance_from_previous_km,
            landmark=stop.landmark,
            is_origin=index == 0,
            is_terminus=index == last,
        ))
    return entries


def total_trip_minutes(stops: Sequence[BusStop]) -> int:
    """Total trip duration: cumulative minutes at the last stop."""
    return build_timeline(stops)[-1].cumulative_minutes


def total_distance_km(stops: Sequence[BusStop]) -> float:
    """Route length from origin to terminus; the leg into the origin is not counted."""
    if not stops:
        raise ValueError("Cannot measure a route with no stops")
    return round(sum(stop.distance_from_previous_km for stop in stops[1:]), 2)
