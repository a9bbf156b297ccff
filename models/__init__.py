"""
Models for KTM Transit Advisor.

This package contains Pydantic models for routes, derived views and
generator output.
"""

from .bus_stop import BusStop
from .route import Route, TrafficCondition, TRAFFIC_CONDITIONS
from .crowd_sample import CrowdSample
from .timeline_entry import TimelineEntry
from .grounding_chunk import GroundingChunk
from .generator_output import GeneratorOutput
from .route_lookup_response import RouteLookupResponse, SourceLink
from .route_lookup_error import RouteLookupError

__all__ = [
    'BusStop',
    'Route',
    'TrafficCondition',
    'TRAFFIC_CONDITIONS',
    'CrowdSample',
    'TimelineEntry',
    'GroundingChunk',
    'GeneratorOutput',
    'RouteLookupResponse',
    'SourceLink',
    'RouteLookupError',
]
