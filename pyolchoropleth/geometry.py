"""Default geometry queries used to anchor overlays and frame the view.

Geometries may be GeoJSON-like mappings ({"type": ..., "coordinates": ...}),
full GeoJSON features, or shapely geometries. Coordinates are taken as-is;
reprojection is the map widget's business.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Tuple

from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from .models import BoundingBox, Coordinate

# Geometry types with a meaningful interior point
AREAL_TYPES = ("Polygon", "MultiPolygon")

# Width of the world in map units at zoom 0 (degrees for EPSG:4326)
WORLD_WIDTH_DEGREES = 360.0
TILE_SIZE = 256


class UnsupportedGeometryError(ValueError):
    """Raised when a geometry query cannot be answered for a geometry."""


def as_shape(geometry: Any) -> BaseGeometry:
    if isinstance(geometry, BaseGeometry):
        return geometry
    if isinstance(geometry, Mapping) and geometry.get("type") == "Feature":
        geometry = geometry.get("geometry")
    try:
        return shape(geometry)
    except (ShapelyError, AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise UnsupportedGeometryError(f"Cannot read geometry: {e}") from e


def interior_point(geometry: Any) -> Coordinate:
    """Point guaranteed to lie inside a (multi)polygon.

    Raises:
        UnsupportedGeometryError: For non-areal, empty or unreadable geometries.
    """
    geom = as_shape(geometry)
    if geom.is_empty or geom.geom_type not in AREAL_TYPES:
        raise UnsupportedGeometryError(
            f"No interior point for {'empty ' if geom.is_empty else ''}{geom.geom_type}"
        )
    pt = geom.representative_point()
    return (float(pt.x), float(pt.y))


def extent(geometry: Any) -> BoundingBox:
    """Bounding box of a geometry.

    Raises:
        UnsupportedGeometryError: For empty or unreadable geometries.
    """
    geom = as_shape(geometry)
    if geom.is_empty:
        raise UnsupportedGeometryError(f"Empty {geom.geom_type} has no extent")
    min_x, min_y, max_x, max_y = (float(b) for b in geom.bounds)
    return BoundingBox(min_x, min_y, max_x, max_y)


def zoom_for_extent(
    bbox: BoundingBox,
    viewport_size: Tuple[int, int] = (800, 600),
    world_width: float = WORLD_WIDTH_DEGREES,
    tile_size: int = TILE_SIZE,
) -> Optional[float]:
    """Zoom level at which ``bbox`` fits a viewport of ``viewport_size`` pixels.

    Mirrors OpenLayers' resolution-for-extent then zoom-for-resolution on a
    standard 2x zoom pyramid. Returns None for degenerate (point) extents.
    """
    width_px, height_px = viewport_size
    if width_px <= 0 or height_px <= 0:
        return None
    resolution = max(bbox.width / float(width_px), bbox.height / float(height_px))
    if not math.isfinite(resolution) or resolution <= 0:
        return None
    max_resolution = world_width / float(tile_size)
    return math.log2(max_resolution / resolution)
