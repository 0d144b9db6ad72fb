# ============================================================================
# CLAUDE CONTEXT - PARCELS MODELS
# ============================================================================
# STATUS: Standalone Models - Parcels API
# PURPOSE: Typed filter inputs, limit policies and resolved locations
# EXPORTS: FilterSpec, LimitPolicy, ResolvedPoint
# INTERFACES: Pydantic BaseModel, dataclasses
# DEPENDENCIES: pydantic, typing
# VALIDATION: Lenient - malformed values become None instead of errors
# PATTERNS: Data Transfer Objects (DTOs)
# ENTRY_POINTS: from parcels.models import FilterSpec
# ============================================================================

"""
Parcels API Models

FilterSpec is built once at the HTTP boundary from raw query-string values.
Everything downstream works with typed optionals.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .validation import parse_flag, parse_optional_int, parse_optional_number


class FilterSpec(BaseModel):
    """
    Validated set of optional constraints for one parcels query.

    Accepts both the query-string names (minPrice, isAuthenticated, ...) and
    the field names. Bounds are None or finite non-negative numbers.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    authenticated: bool = Field(
        default=False,
        alias="isAuthenticated",
        description="Authenticated callers see every county"
    )
    min_price: Optional[float] = Field(
        default=None,
        alias="minPrice",
        description="Lower bound on assessed value (floored before use)"
    )
    max_price: Optional[float] = Field(
        default=None,
        alias="maxPrice",
        description="Upper bound on assessed value (floored before use)"
    )
    min_sqft: Optional[float] = Field(
        default=None,
        alias="minSqft",
        description="Lower bound on parcel area"
    )
    max_sqft: Optional[float] = Field(
        default=None,
        alias="maxSqft",
        description="Upper bound on parcel area"
    )
    limit: Optional[int] = Field(
        default=None,
        description="Requested row cap (policy default when absent)"
    )

    @field_validator("authenticated", mode="before")
    @classmethod
    def _parse_authenticated(cls, v: Any) -> bool:
        return parse_flag(v)

    @field_validator("min_price", "max_price", "min_sqft", "max_sqft", mode="before")
    @classmethod
    def _parse_bound(cls, v: Any) -> Optional[float]:
        return parse_optional_number(v)

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, v: Any) -> Optional[int]:
        return parse_optional_int(v)

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "FilterSpec":
        """Build from a query-string mapping; unknown keys are ignored."""
        known = ("isAuthenticated", "minPrice", "maxPrice", "minSqft", "maxSqft", "limit")
        return cls(**{k: params.get(k) for k in known})


@dataclass(frozen=True)
class LimitPolicy:
    """Row cap rules for one endpoint: default when absent, hard ceiling always."""
    default: int
    ceiling: int

    def apply(self, requested: Optional[int]) -> int:
        return min(requested if requested is not None else self.default, self.ceiling)


@dataclass(frozen=True)
class ResolvedPoint:
    """Representative location of a parcel geometry."""
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}
