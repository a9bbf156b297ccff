"""Model for a grounding citation returned alongside generated route text."""

from typing import Optional

from pydantic import BaseModel, Field


class GroundingChunk(BaseModel):
    """A citation chunk; either URI may be missing."""
    maps_uri: Optional[str] = Field(default=None, description="Map service URI")
    web_uri: Optional[str] = Field(default=None, description="Web page URI")
