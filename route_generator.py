"""
Route text generator.

Asks an OpenAI search-enabled model to identify a Kathmandu Valley bus route
and return it as JSON, grounding stop locations through web search. The model
is treated as an opaque capability: it returns text and optional citations,
with no guarantees about latency or determinism.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import urlparse

from openai import OpenAI, APIError

from config import get_config
from models import GeneratorOutput, GroundingChunk
from route_errors import TransportFailure

logger = logging.getLogger(__name__)

ROUTE_PROMPT_TEMPLATE = """You are an intelligent transit assistant for {area}.
The user is searching for bus route information for: "{query}".

Task:
1. Identify the bus route, key stops, and schedule.
2. Use web search to verify stop locations and assess current or typical traffic conditions for this route in {area}.
3. Provide a traffic condition assessment (Light, Moderate, or Heavy) and a brief analysis.
4. Return the result as a raw, valid JSON object. Do not wrap in markdown code blocks.

JSON Structure:
{{
  "busNumber": "string",
  "routeName": "string",
  "description": "string",
  "frequencyMinutes": number,
  "firstBusTime": "HH:MM",
  "lastBusTime": "HH:MM",
  "trafficCondition": "Light" | "Moderate" | "Heavy",
  "trafficAnalysis": "string (brief explanation of traffic state)",
  "stops": [
    {{
      "id": number,
      "name": "string",
      "distanceFromPreviousKm": number,
      "typicalTravelTimeMinutes": number,
      "landmark": "string or null"
    }}
  ]
}}

Ensure at least 8-10 major stops, in route order. The first stop's distance and travel time are 0.
"""

_MAP_HOSTS = ("maps.google.com", "maps.app.goo.gl", "www.openstreetmap.org", "openstreetmap.org")


def build_route_prompt(query: str, area: Optional[str] = None) -> str:
    """Fill the fixed route prompt for a rider's query."""
    area = area or get_config().service_area
    return ROUTE_PROMPT_TEMPLATE.format(area=area, query=query.strip())


def is_map_url(url: str) -> bool:
    """True if the URL points at a map service rather than a web page."""
    parsed = urlparse(url)
    host = (parsed.netloc or "").lower()
    if host in _MAP_HOSTS:
        return True
    return host.endswith("google.com") and parsed.path.startswith("/maps")


def chunk_for_url(url: str) -> GroundingChunk:
    """Wrap a citation URL as a grounding chunk of the right kind."""
    if is_map_url(url):
        return GroundingChunk(maps_uri=url)
    return GroundingChunk(web_uri=url)


class RouteTextGenerator(ABC):
    """Given a query, return route text and optional grounding citations."""

    @abstractmethod
    def generate(self, query: str) -> GeneratorOutput:
        """
        Generate route text for a query.

        Raises:
            TransportFailure: If the underlying call fails
        """


class OpenAIRouteGenerator(RouteTextGenerator):
    """Route text generator backed by OpenAI chat completions with web search."""

    def __init__(self, openai_client: OpenAI = None, model: Optional[str] = None):
        """
        Initialize the generator.

        Args:
            openai_client: OpenAI client instance (if None, creates default)
            model: Search-capable model name (defaults to configuration)
        """
        config = get_config()
        if openai_client is None:
            api_key = config.openai_api_key
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in configuration")
            openai_client = OpenAI(api_key=api_key)

        self.client = openai_client
        self.model = model or config.openai_model
        self.timeout = config.openai_timeout_seconds
        self.web_search_options = {
            "search_context_size": config.search_context_size,
            "user_location": {
                "type": "approximate",
                "approximate": {
                    "country": config.grounding_country,
                    "city": config.grounding_city,
                    "region": config.grounding_region,
                    "timezone": config.grounding_timezone,
                },
            },
        }

    def generate(self, query: str) -> GeneratorOutput:
        prompt = build_route_prompt(query)
        logger.info(f"Requesting route text from {self.model} for query: {query[:50]}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                web_search_options=self.web_search_options,
                timeout=self.timeout,
            )
        except APIError as e:
            logger.error(f"Route generator call failed: {type(e).__name__}: {e}")
            raise TransportFailure(f"Route generator call failed: {e}") from e

        if not response.choices:
            logger.warning("Route generator returned no choices")
            return GeneratorOutput()

        message = response.choices[0].message
        chunks = self._grounding_chunks(message)
        logger.info(f"Route generator returned {len(message.content or '')} chars, {len(chunks)} citations")
        return GeneratorOutput(text=message.content or "", grounding_chunks=chunks)

    @staticmethod
    def _grounding_chunks(message) -> List[GroundingChunk]:
        chunks = []
        for annotation in getattr(message, "annotations", None) or []:
            if getattr(annotation, "type", None) != "url_citation":
                continue
            citation = getattr(annotation, "url_citation", None)
            url = getattr(citation, "url", None)
            if url:
                chunks.append(chunk_for_url(url))
        return chunks
