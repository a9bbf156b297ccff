"""
Route lookup pipeline for KTM Transit Advisor.

query -> route generator -> parser/validator (+ grounding sources)
      -> crowd synthesizer -> timeline

Also tracks which lookup result is on display, so a slow response to an
older query can never replace the result of a newer one.
"""

import logging
import random
import sys
import threading
from typing import List, Optional

from models import CrowdSample, Route, RouteLookupResponse
from route_errors import RouteResolutionError, TransportFailure
from route_generator import RouteTextGenerator
from route_parser import parse_route_text
from source_deduplicator import collect_source_urls, label_sources
from crowd_synthesizer import synthesize_crowd
from timeline import build_timeline, total_distance_km

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTIONS = [
    "Ring Road (Ba 1 Ja 1234)",
    "Ratnapark to Bhaktapur",
    "Lagankhel to Budhanilkantha",
    "Kalanki to Thankot",
    "Koteshwor to Gongabu",
]


class RouteService:
    """
    Resolves rider queries into validated routes.

    Failures are raised as RouteResolutionError subclasses and never retried;
    the caller decides whether to query again.
    """

    def __init__(self, generator: RouteTextGenerator, rng: Optional[random.Random] = None):
        """
        Initialize the service.

        Args:
            generator: Route text generator
            rng: Random source for crowd synthesis (unseeded if None)
        """
        self.generator = generator
        self.rng = rng

    def resolve_route(self, query: str) -> Route:
        """
        Resolve a query to a validated Route with grounding sources attached.

        Raises:
            ValueError: If the query is blank
            RouteResolutionError: EmptyResponse, MalformedPayload,
                InvalidFieldValue or TransportFailure
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")

        try:
            output = self.generator.generate(query)
        except RouteResolutionError:
            raise
        except Exception as e:
            logger.error(f"Route generator raised {type(e).__name__}: {e}", exc_info=True)
            raise TransportFailure(f"Route generator failed: {e}") from e

        result = parse_route_text(output.text)
        if not result.ok:
            logger.warning(f"Route resolution failed for '{query[:50]}': {result.error.kind}: {result.error.message}")
            raise result.error

        sources = collect_source_urls(output.grounding_chunks)
        route = result.route.model_copy(update={"source_urls": sources})
        logger.info(f"Resolved '{query[:50]}' to {route.bus_number} with {len(sources)} sources")
        return route

    def synthesize_crowd(self, route_name: str) -> List[CrowdSample]:
        """Estimated crowd series for a route."""
        return synthesize_crowd(route_name, rng=self.rng)

    def lookup(self, query: str) -> RouteLookupResponse:
        """Resolve a query and derive everything the presentation layer shows."""
        route = self.resolve_route(query)
        crowd = self.synthesize_crowd(route.route_name)
        timeline = build_timeline(route.stops)
        return RouteLookupResponse(
            route=route,
            crowd=crowd,
            timeline=timeline,
            total_minutes=timeline[-1].cumulative_minutes,
            total_distance_km=total_distance_km(route.stops),
            sources=label_sources(route.source_urls),
        )


class DisplayState:
    """
    The single 'currently displayed' slot for one rider session.

    Each lookup takes a token from begin_query(). Only the holder of the
    latest token may publish; anything older is discarded on arrival. The
    route and its crowd series live in one response object, so they are
    always swapped together.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest_token = 0
        self._current: Optional[RouteLookupResponse] = None

    def begin_query(self) -> int:
        """Issue a new, strictly increasing query token."""
        with self._lock:
            self._latest_token += 1
            return self._latest_token

    def publish(self, token: int, response: RouteLookupResponse) -> bool:
        """
        Display a lookup result if its token is still the latest.

        Returns:
            True if displayed, False if superseded and discarded
        """
        with self._lock:
            if token != self._latest_token:
                logger.info(f"Discarding superseded result (token {token}, latest {self._latest_token})")
                return False
            self._current = response
            return True

    def fail(self, token: int) -> bool:
        """Clear the display after a failed lookup, if the token is still the latest."""
        with self._lock:
            if token != self._latest_token:
                return False
            self._current = None
            return True

    def current(self) -> Optional[RouteLookupResponse]:
        with self._lock:
            return self._current


def format_lookup(response: RouteLookupResponse) -> str:
    """Plain-text rendering of a lookup result for the terminal."""
    route = response.route
    lines = [
        f"{route.bus_number}: {route.route_name}",
        route.description,
        f"Every {route.frequency_minutes} min, {route.first_bus_time} - {route.last_bus_time}",
        f"Traffic: {route.traffic_condition} - {route.traffic_analysis}",
        "",
        f"Timeline ({response.total_minutes} min, {response.total_distance_km} km):",
    ]
    for entry in response.timeline:
        landmark = f" (near {entry.landmark})" if entry.landmark else ""
        lines.append(f"  +{entry.cumulative_minutes:>3} min  {entry.stop_name}{landmark}")

    lines.append("")
    lines.append("Typical crowd levels:")
    for sample in response.crowd:
        lines.append(f"  {sample.hour:>5} {'#' * (sample.level // 5)} {sample.level}")

    if response.sources:
        lines.append("")
        for source in response.sources:
            lines.append(f"{source.label}: {source.url}")
    return "\n".join(lines)


def main():
    """
    Look up a bus route from the command line.

    With an argument, looks up that query once; otherwise starts an
    interactive prompt.
    """
    from dependencies import get_container

    logging.basicConfig(level=logging.WARNING)

    try:
        service = get_container().get_route_service()
    except ValueError as e:
        print(f"Error: {e}")
        print("Please ensure OPENAI_API_KEY is set in your .env file.")
        return 1

    def run(query: str):
        try:
            print(format_lookup(service.lookup(query)))
        except RouteResolutionError as e:
            logger.debug(f"{e.kind}: {e.message}")
            print(e.user_message)

    if len(sys.argv) > 1:
        run(" ".join(sys.argv[1:]))
        return 0

    print("KTM Transit Advisor - type a bus number or route name, 'quit' to exit")
    print("Try: " + ", ".join(DEFAULT_SUGGESTIONS))
    while True:
        try:
            query = input("\nRoute: ").strip()
        except (KeyboardInterrupt, EOFError):
            print()
            break
        if query.lower() == 'quit':
            break
        if not query:
            continue
        run(query)
    return 0


if __name__ == "__main__":
    sys.exit(main())
