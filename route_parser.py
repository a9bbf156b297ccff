"""
Route parser and validator.

Turns raw generator text (a JSON object, possibly wrapped in markdown code
fences) into a validated Route. Parsing is a pure transform: nothing is
retried and nothing is coerced into range.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from models import Route
from route_errors import EmptyResponse, InvalidFieldValue, MalformedPayload, RouteResolutionError

logger = logging.getLogger(__name__)

# Fence marker with an optional language tag: ```json, ```JSON, ```
_FENCE_MARKER = re.compile(r"```[A-Za-z0-9_+-]*")


@dataclass(frozen=True)
class ParseResult:
    """Tagged parse outcome: exactly one of route or error is set."""
    route: Optional[Route] = None
    error: Optional[RouteResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.route is not None

    def unwrap(self) -> Route:
        """Return the route or raise the parse error."""
        if self.error is not None:
            raise self.error
        return self.route


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fence markers and outer whitespace.

    Already-clean text is returned stripped but otherwise unchanged, so
    applying this twice gives the same result as applying it once.
    """
    if not text:
        return ""
    return _FENCE_MARKER.sub("", text).strip()


def format_error_location(loc: Sequence[Union[str, int]]) -> str:
    """Render a pydantic error location as a field path, e.g. stops[0].name."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "route"


def _first_invalid_field(error: ValidationError) -> InvalidFieldValue:
    first = error.errors()[0]
    field = format_error_location(first.get("loc", ()))
    return InvalidFieldValue(field, first.get("msg", "invalid value"))


def parse_route_text(text: Optional[str]) -> ParseResult:
    """
    Parse generator text into a validated Route.

    Args:
        text: Raw generator output

    Returns:
        ParseResult holding either the Route (with no source URLs attached)
        or the EmptyResponse / MalformedPayload / InvalidFieldValue error
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        logger.warning("Route text empty after stripping code fences")
        return ParseResult(error=EmptyResponse())

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse route JSON: {e}")
        logger.debug(f"Unparseable route text: {cleaned[:500]}")
        return ParseResult(error=MalformedPayload(raw_text=cleaned))

    if not isinstance(data, dict):
        logger.error(f"Route JSON is a {type(data).__name__}, expected an object")
        return ParseResult(error=MalformedPayload("Route payload is not a JSON object", raw_text=cleaned))

    # Sources come from grounding metadata, never from the model's own text
    data.pop("sourceUrls", None)

    try:
        route = Route.model_validate(data)
    except ValidationError as e:
        invalid = _first_invalid_field(e)
        logger.warning(f"Route failed validation ({e.error_count()} errors), first: {invalid.message}")
        return ParseResult(error=invalid)

    logger.info(f"Parsed route {route.bus_number} '{route.route_name}' with {len(route.stops)} stops")
    return ParseResult(route=route)


def parse_route(text: Optional[str]) -> Route:
    """Parse generator text into a Route, raising RouteResolutionError on failure."""
    return parse_route_text(text).unwrap()
