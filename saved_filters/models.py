"""
Saved filter payloads.

Field names match the JSON the frontend sends (camelCase). Unknown keys are
kept so the keyed store round-trips whatever the client saved.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SavedFilter(BaseModel):
    """
    A user's parcel filter selection.
    """
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    minPrice: Optional[float] = Field(default=None, ge=0)
    maxPrice: Optional[float] = Field(default=None, ge=0)
    minSqft: Optional[float] = Field(default=None, ge=0)
    maxSqft: Optional[float] = Field(default=None, ge=0)
    updatedAt: Optional[str] = Field(
        default=None,
        description="ISO 8601 UTC timestamp, set when saved as a user's latest filter"
    )


FILTER_FIELDS = ("minPrice", "maxPrice", "minSqft", "maxSqft")
