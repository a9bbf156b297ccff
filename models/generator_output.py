"""Model for raw route generator output."""

from typing import List

from pydantic import BaseModel, Field

from .grounding_chunk import GroundingChunk


class GeneratorOutput(BaseModel):
    """Unstructured model text plus any grounding citations."""
    text: str = Field(default="", description="Raw model output, expected to hold a JSON object")
    grounding_chunks: List[GroundingChunk] = Field(default_factory=list, description="Grounding citations")
