# ============================================================================
# CLAUDE CONTEXT - PARCELS PREDICATE BUILDER
# ============================================================================
# STATUS: Standalone Query Builder - Parcels API
# PURPOSE: Turn a FilterSpec into ordered WHERE fragments and bind values
# EXPORTS: BuiltQuery, build_parcel_query, AUTHORIZED_COUNTY
# DEPENDENCIES: math, dataclasses
# VALIDATION: Values are always bound through placeholders, never inlined
# PATTERNS: Query Builder (pure)
# ENTRY_POINTS: built = build_parcel_query(spec, config.interactive_limits)
# ============================================================================

"""
Parcels Predicate Builder

Conditions are appended in a fixed order:

    authorization -> minPrice -> maxPrice -> minSqft -> maxSqft

Each condition carries exactly one PostgreSQL positional placeholder. The
position is the length of the value list after the value is appended, so the
Nth fragment always binds the Nth value and the row limit takes the final
position (len(values) + 1).

Example:
    >>> built = build_parcel_query(FilterSpec(minPrice=100.9), LimitPolicy(50, 200))
    >>> built.where_sql
    'LOWER(county) = $1 AND total_value >= $2'
    >>> built.params
    ('dallas', 100, 50)
"""

import math
from dataclasses import dataclass
from typing import Any, List, Tuple

from .models import FilterSpec, LimitPolicy

# Unauthenticated callers only ever see this county.
AUTHORIZED_COUNTY = "dallas"

COUNTY_COLUMN = "county"
VALUE_COLUMN = "total_value"
AREA_COLUMN = "sqft"


@dataclass(frozen=True)
class BuiltQuery:
    conditions: Tuple[str, ...]
    values: Tuple[Any, ...]
    limit_value: int

    @property
    def has_conditions(self) -> bool:
        return bool(self.conditions)

    @property
    def where_sql(self) -> str:
        """Conditions joined with AND; empty string when there are none."""
        return " AND ".join(self.conditions)

    @property
    def limit_position(self) -> int:
        return len(self.values) + 1

    @property
    def limit_placeholder(self) -> str:
        return f"${self.limit_position}"

    @property
    def params(self) -> Tuple[Any, ...]:
        """Bind values in placeholder order, limit last."""
        return self.values + (self.limit_value,)


def build_parcel_query(spec: FilterSpec, limits: LimitPolicy) -> BuiltQuery:
    """
    Build the WHERE conditions, bind values and row limit for a parcels query.

    Never raises: FilterSpec has already reduced every input to a finite
    number or None.
    """
    conditions: List[str] = []
    values: List[Any] = []

    def add(template: str, value: Any) -> None:
        values.append(value)
        conditions.append(template.format(p=f"${len(values)}"))

    if not spec.authenticated:
        add(f"LOWER({COUNTY_COLUMN}) = {{p}}", AUTHORIZED_COUNTY)

    if spec.min_price is not None:
        add(f"{VALUE_COLUMN} >= {{p}}", math.floor(spec.min_price))

    if spec.max_price is not None:
        add(f"{VALUE_COLUMN} <= {{p}}", math.floor(spec.max_price))

    # sqft is nullable; the IS NOT NULL guard belongs to each bound clause.
    if spec.min_sqft is not None:
        add(f"{AREA_COLUMN} IS NOT NULL AND {AREA_COLUMN} >= {{p}}", spec.min_sqft)

    if spec.max_sqft is not None:
        add(f"{AREA_COLUMN} IS NOT NULL AND {AREA_COLUMN} <= {{p}}", spec.max_sqft)

    return BuiltQuery(
        conditions=tuple(conditions),
        values=tuple(values),
        limit_value=limits.apply(spec.limit)
    )
