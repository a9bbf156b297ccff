"""
Crowd series synthesizer.

Produces a locally estimated ridership load per service hour. This is a
visual estimate, not a measurement; levels are randomized on every call.
"""

import logging
import random
from typing import List, Optional

from models import CrowdSample

logger = logging.getLogger(__name__)

FIRST_HOUR = 6
LAST_HOUR = 20

BASE_LEVEL = 30
MORNING_RUSH = (8, 10)
MORNING_RUSH_LEVEL = 90
EVENING_RUSH = (16, 18)
EVENING_RUSH_LEVEL = 95
MIDDAY_HOUR = 12
MIDDAY_LEVEL = 50

JITTER = 10
MIN_LEVEL = 10
MAX_LEVEL = 100


def base_level(hour: int) -> int:
    """Typical load for an hour before jitter."""
    if MORNING_RUSH[0] <= hour <= MORNING_RUSH[1]:
        return MORNING_RUSH_LEVEL
    if EVENING_RUSH[0] <= hour <= EVENING_RUSH[1]:
        return EVENING_RUSH_LEVEL
    if hour == MIDDAY_HOUR:
        return MIDDAY_LEVEL
    return BASE_LEVEL


def synthesize_crowd(route_name: str, rng: Optional[random.Random] = None) -> List[CrowdSample]:
    """
    Build the estimated crowd series for a route.

    Args:
        route_name: Route the series is shown for (not used to look anything up)
        rng: Random source; pass a seeded random.Random for reproducible output

    Returns:
        One CrowdSample per hour from 6:00 to 20:00, ascending
    """
    rng = rng or random.Random()
    samples = []
    for hour in range(FIRST_HOUR, LAST_HOUR + 1):
        level = base_level(hour) + rng.uniform(-JITTER, JITTER)
        level = min(MAX_LEVEL, max(MIN_LEVEL, level))
        samples.append(CrowdSample(hour=f"{hour}:00", level=round(level)))

    logger.debug(f"Synthesized {len(samples)} crowd samples for '{route_name}'")
    return samples
