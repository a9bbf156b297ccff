"""
Failure taxonomy for route resolution.

Every failure collapses to a single user-facing message at the API boundary,
but each kind stays distinguishable for logging and tests.
"""

from typing import Optional

USER_ERROR_MESSAGE = "Unable to find route details. Please check the bus number and try again."


class RouteResolutionError(Exception):
    """Base class for all route resolution failures."""

    kind = "RouteResolutionError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def user_message(self) -> str:
        """Message safe to show to riders."""
        return USER_ERROR_MESSAGE


class EmptyResponse(RouteResolutionError):
    """The generator returned no usable text."""

    kind = "EmptyResponse"

    def __init__(self, message: str = "No response from route generator"):
        super().__init__(message)


class MalformedPayload(RouteResolutionError):
    """The generator text is not a JSON object."""

    kind = "MalformedPayload"

    def __init__(self, message: str = "Received invalid data format from route generator", raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class InvalidFieldValue(RouteResolutionError):
    """A required field is missing, has the wrong type, or is out of range."""

    kind = "InvalidFieldValue"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid value for '{field}': {reason}")
        self.field = field
        self.reason = reason


class TransportFailure(RouteResolutionError):
    """The generator call itself failed (network, auth, quota)."""

    kind = "TransportFailure"
