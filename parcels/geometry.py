# ============================================================================
# CLAUDE CONTEXT - PARCELS GEOMETRY RESOLVER
# ============================================================================
# STATUS: Standalone Geometry Helpers - Parcels API
# PURPOSE: Decode WKB/EWKB parcel geometries and pick one representative point
# EXPORTS: GeometryKind, GeometryNode, GeometryDecodeError, decode_geometry,
#          representative_point, resolve_point, annotate_rows
# DEPENDENCIES: shapely, math, util_logger
# SOURCE: PostGIS geometry column (hex EWKB text or raw bytes)
# VALIDATION: Decode failures degrade to "no location" for that row only
# PATTERNS: Tagged tree, recursive traversal
# ENTRY_POINTS: rows = annotate_rows(rows, geometry_column="geom")
# ============================================================================

"""
Parcel Geometry Resolver

Turns one row's binary geometry into a latitude/longitude pair:

1. Normalize the raw value to bytes (hex strings are decoded).
2. Decode with shapely into a GeometryNode tree tagged by kind.
3. Pick a point:
   - Point: its own coordinate (both components finite).
   - GeometryCollection: first child that resolves, in child order.
   - Everything else: centre of the bounding box of every coordinate pair,
     skipping non-finite components.

The bounding-box centre is not an area centroid and can fall outside
concave or multi-part polygons.

Coordinate pairs are (longitude, latitude), GeoJSON order.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from shapely import wkb
from shapely.geometry.base import BaseGeometry

from util_logger import LoggerFactory, ComponentType

from .models import ResolvedPoint

logger = LoggerFactory.create_logger(ComponentType.RESOLVER, "GeometryResolver")


class GeometryKind(str, Enum):
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTIPOINT = "MultiPoint"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"
    GEOMETRYCOLLECTION = "GeometryCollection"


# Nesting depth of coordinate pairs inside GeometryNode.coordinates.
_COORDINATE_DEPTH = {
    GeometryKind.POINT: 0,
    GeometryKind.LINESTRING: 1,
    GeometryKind.MULTIPOINT: 1,
    GeometryKind.POLYGON: 2,
    GeometryKind.MULTILINESTRING: 2,
    GeometryKind.MULTIPOLYGON: 3,
}

Pair = Tuple[float, ...]


class GeometryDecodeError(ValueError):
    """Raised when a raw geometry cannot be turned into a GeometryNode."""


@dataclass(frozen=True)
class GeometryNode:
    """
    Decoded geometry.

    coordinates holds nested tuples of (lng, lat) pairs at the depth implied
    by kind (a bare pair for Point, an empty tuple when the shape is empty).
    children is only populated for GeometryCollection.
    """
    kind: GeometryKind
    coordinates: Any = ()
    children: Tuple["GeometryNode", ...] = ()


# ============================================================================
# DECODING
# ============================================================================

def to_wkb_bytes(raw: Any) -> bytes:
    """Return raw geometry as bytes; hex strings (optionally \\x-prefixed) are decoded."""
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if text[:2].lower() == "\\x":
            text = text[2:]
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise GeometryDecodeError(f"Invalid hex geometry: {e}") from e
    raise GeometryDecodeError(f"Unsupported geometry value type: {type(raw).__name__}")


def decode_geometry(raw: Any) -> GeometryNode:
    """
    Decode WKB or PostGIS EWKB into a GeometryNode.

    Raises:
        GeometryDecodeError: malformed bytes or an unsupported geometry kind
    """
    data = to_wkb_bytes(raw)
    if not data:
        raise GeometryDecodeError("Empty geometry value")

    try:
        geom = wkb.loads(data)
    except Exception as e:
        raise GeometryDecodeError(f"Malformed WKB: {e}") from e

    return _to_node(geom)


def _pair(coord: Sequence[float]) -> Pair:
    return (coord[0], coord[1])


def _line(geom: BaseGeometry) -> Tuple[Pair, ...]:
    return tuple(_pair(c) for c in geom.coords)


def _rings(polygon: BaseGeometry) -> Tuple[Tuple[Pair, ...], ...]:
    if polygon.is_empty:
        return ()
    return (_line(polygon.exterior),) + tuple(_line(ring) for ring in polygon.interiors)


def _to_node(geom: BaseGeometry) -> GeometryNode:
    try:
        kind = GeometryKind(geom.geom_type)
    except ValueError:
        raise GeometryDecodeError(f"Unsupported geometry type: {geom.geom_type}")

    if kind is GeometryKind.POINT:
        coords = _line(geom)
        return GeometryNode(kind, coords[0] if coords else ())
    if kind is GeometryKind.LINESTRING:
        return GeometryNode(kind, _line(geom))
    if kind is GeometryKind.POLYGON:
        return GeometryNode(kind, _rings(geom))
    if kind is GeometryKind.MULTIPOINT:
        return GeometryNode(kind, tuple(c for part in geom.geoms for c in _line(part)))
    if kind is GeometryKind.MULTILINESTRING:
        return GeometryNode(kind, tuple(_line(part) for part in geom.geoms))
    if kind is GeometryKind.MULTIPOLYGON:
        return GeometryNode(kind, tuple(_rings(part) for part in geom.geoms))
    return GeometryNode(kind, children=tuple(_to_node(part) for part in geom.geoms))


# ============================================================================
# POINT EXTRACTION
# ============================================================================

def _point_from_pair(pair: Sequence[float]) -> Optional[ResolvedPoint]:
    if len(pair) < 2:
        return None
    lng, lat = float(pair[0]), float(pair[1])
    if not (math.isfinite(lng) and math.isfinite(lat)):
        return None
    return ResolvedPoint(latitude=lat, longitude=lng)


def _iter_pairs(coordinates: Any, depth: int) -> Iterator[Pair]:
    if depth == 0:
        if coordinates:
            yield coordinates
        return
    for part in coordinates:
        yield from _iter_pairs(part, depth - 1)


def flatten_coordinates(node: GeometryNode) -> List[Pair]:
    """Every coordinate pair reachable from node, in traversal order."""
    if node.kind is GeometryKind.GEOMETRYCOLLECTION:
        return [pair for child in node.children for pair in flatten_coordinates(child)]
    return list(_iter_pairs(node.coordinates, _COORDINATE_DEPTH[node.kind]))


def bbox_center(pairs: Iterable[Sequence[float]]) -> Optional[ResolvedPoint]:
    """Midpoint of the bounding box; non-finite components are skipped."""
    lngs: List[float] = []
    lats: List[float] = []
    for pair in pairs:
        if len(pair) < 2:
            continue
        lng, lat = float(pair[0]), float(pair[1])
        if math.isfinite(lng):
            lngs.append(lng)
        if math.isfinite(lat):
            lats.append(lat)

    if not lngs or not lats:
        return None

    return ResolvedPoint(
        latitude=(min(lats) + max(lats)) / 2,
        longitude=(min(lngs) + max(lngs)) / 2
    )


def representative_point(node: GeometryNode) -> Optional[ResolvedPoint]:
    """Pick one location for a decoded geometry, or None."""
    if node.kind is GeometryKind.POINT:
        return _point_from_pair(node.coordinates)

    if node.kind is GeometryKind.GEOMETRYCOLLECTION:
        # Child order decides, not child type.
        for child in node.children:
            point = representative_point(child)
            if point is not None:
                return point

    return bbox_center(flatten_coordinates(node))


# ============================================================================
# ROW BOUNDARY
# ============================================================================

def resolve_point(raw: Any) -> Optional[ResolvedPoint]:
    """
    Resolve a raw geometry value to a point without ever raising.

    None input gives None. Failures are logged once and give None.
    """
    if raw is None:
        return None
    try:
        return representative_point(decode_geometry(raw))
    except Exception as e:
        logger.warning(f"Geometry resolution failed ({type(e).__name__}): {e}")
        return None


def annotate_rows(
    rows: Iterable[Dict[str, Any]],
    geometry_column: str = "geom"
) -> List[Dict[str, Any]]:
    """
    Copy rows in order, adding latitude/longitude where the geometry resolves.

    The geometry column is dropped. Rows whose geometry cannot be resolved
    get no location keys at all.
    """
    annotated = []
    for row in rows:
        out = dict(row)
        raw = out.pop(geometry_column, None)
        point = resolve_point(raw)
        if point is not None:
            out.update(point.to_dict())
        annotated.append(out)
    return annotated
