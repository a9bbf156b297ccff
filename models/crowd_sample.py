"""Model for one hour of the estimated crowd series."""

from pydantic import BaseModel, ConfigDict, Field


class CrowdSample(BaseModel):
    """Estimated ridership load for one service hour (local estimate, not measured)."""
    model_config = ConfigDict(frozen=True)

    hour: str = Field(..., pattern=r"^\d{1,2}:00$", description="Hour label, e.g. '8:00'")
    level: int = Field(..., ge=10, le=100, description="Estimated load, 10-100")
