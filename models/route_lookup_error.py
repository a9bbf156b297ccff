"""Model for route lookup error response."""

from pydantic import BaseModel, Field


class RouteLookupError(BaseModel):
    """Model for route lookup error response."""
    error: str = Field(..., description="Error message")
    message: str = Field(..., description="Detailed error description")
