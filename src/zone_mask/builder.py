"""Exclusion mask construction: world rectangle minus the union of all zones.

Zone rings are normalized (outer rings counter-clockwise, holes clockwise)
and rounded, split into valid parts when self-intersecting, unioned one
feature at a time with Shapely, and subtracted from :data:`WORLD_RING`.  If
the boolean engine still rejects the input the mask degrades to a single
world polygon with every zone outline punched out as a hole; overlapping
zones are then not merged.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union
from shapely.validation import make_valid

from zone_mask.contracts import (
    FALLBACK_HOLE_PUNCH,
    WORLD_RING,
    Feature,
    FeatureCollection,
    MaskConfig,
    MultiPolygonCoords,
    PolygonCoords,
    ZoneCollection,
    iter_features,
)
from zone_mask.rings import ensure_orientation, is_degenerate, normalize_ring
from zone_mask.sanitize import sanitize_multipolygon

logger = logging.getLogger(__name__)

_POLYGONAL_TYPES = ("Polygon", "MultiPolygon")


# ---------------------------------------------------------------------------
# Input normalization
# ---------------------------------------------------------------------------

def _normalize_polygon(rings: Sequence[Any], config: MaskConfig) -> Optional[PolygonCoords]:
    """Normalize one polygon's rings; ``None`` when its outer ring is degenerate."""
    if not rings:
        return None
    out: PolygonCoords = []
    for idx, ring in enumerate(rings):
        normalized = normalize_ring(ring, clockwise=idx != 0, eps=config.collinear_eps)
        if is_degenerate(normalized):
            if idx == 0:
                return None
            continue
        out.append(normalized)
    return out


def normalize_feature(feature: Feature, config: Optional[MaskConfig] = None) -> MultiPolygonCoords:
    """Return a feature's geometry as sanitized MultiPolygon coordinates.

    Non-polygonal or empty geometry yields an empty list.
    """
    if config is None:
        config = MaskConfig()
    geometry = feature.get("geometry")
    if not isinstance(geometry, Mapping) or geometry.get("type") not in _POLYGONAL_TYPES:
        return []
    coords = geometry.get("coordinates")
    if not coords:
        return []
    polygons = [coords] if geometry["type"] == "Polygon" else coords

    normalized: MultiPolygonCoords = []
    for rings in polygons:
        poly = _normalize_polygon(rings, config)
        if poly:
            normalized.append(poly)
    return sanitize_multipolygon(normalized, config.coord_digits)


def collect_zone_polygons(
    zones: ZoneCollection, config: Optional[MaskConfig] = None,
) -> List[MultiPolygonCoords]:
    """Normalize every usable feature, one MultiPolygon per feature."""
    if config is None:
        config = MaskConfig()
    collected: List[MultiPolygonCoords] = []
    for idx, feature in enumerate(iter_features(zones)):
        try:
            mp = normalize_feature(feature, config)
        except (TypeError, ValueError, IndexError, KeyError) as exc:
            logger.debug("Skipping malformed zone feature %d: %s", idx, exc)
            continue
        if mp:
            collected.append(mp)
    return collected


# ---------------------------------------------------------------------------
# Boolean pipeline
# ---------------------------------------------------------------------------

def _valid_polygon(poly: PolygonCoords) -> BaseGeometry:
    """Polygon from rings, self-intersections split into their valid parts."""
    geom = Polygon(poly[0], holes=poly[1:])
    if not geom.is_valid:
        geom = unary_union(_polygon_parts(make_valid(geom)))
    return geom


def _to_geometry(mp: MultiPolygonCoords) -> BaseGeometry:
    return unary_union([_valid_polygon(poly) for poly in mp])


def union_zones(polys: Sequence[MultiPolygonCoords]) -> BaseGeometry:
    """Fold-left union of per-feature geometries."""
    union_geom = _to_geometry(polys[0])
    for mp in polys[1:]:
        union_geom = union_geom.union(_to_geometry(mp))
    return union_geom


def world_polygon() -> Polygon:
    return Polygon(WORLD_RING)


def _polygon_parts(geom: Optional[BaseGeometry]) -> List[Polygon]:
    """Flatten Polygon / MultiPolygon / GeometryCollection into polygons."""
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    parts: List[Polygon] = []
    for part in getattr(geom, "geoms", []):
        parts.extend(_polygon_parts(part))
    return parts


def _ring_coords(ring) -> List[List[float]]:
    return [[float(c[0]), float(c[1])] for c in ring.coords]


def polygon_feature(poly: Polygon, properties: Optional[dict] = None) -> Feature:
    """GeoJSON Polygon feature, outer ring counter-clockwise, holes clockwise."""
    poly = orient(poly, sign=1.0)
    rings = [_ring_coords(poly.exterior)] + [_ring_coords(r) for r in poly.interiors]
    return {
        "type": "Feature",
        "properties": dict(properties or {}),
        "geometry": {"type": "Polygon", "coordinates": rings},
    }


def hole_punch_mask(polys: Sequence[MultiPolygonCoords]) -> FeatureCollection:
    """World polygon with every zone outer ring as a clockwise hole.

    Overlapping zones produce overlapping holes; nothing is merged.
    """
    holes = [
        ensure_orientation(polygon[0], clockwise=True)
        for mp in polys
        for polygon in mp
    ]
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"fallback": True},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[list(p) for p in WORLD_RING]] + holes,
                },
            }
        ],
    }


def build_exclusion(
    zones: ZoneCollection, config: Optional[MaskConfig] = None,
) -> Optional[FeatureCollection]:
    """Return the world minus the union of *zones*, or ``None``.

    ``None`` means there was no usable zone geometry, the zones cover the
    whole world, or the boolean engine failed under the ``"none"`` fallback
    policy.  Never raises on geometric failure.
    """
    if config is None:
        config = MaskConfig()

    polys = collect_zone_polygons(zones, config)
    if not polys:
        return None

    try:
        union_geom = union_zones(polys)
        diff = world_polygon().difference(union_geom)
    except (GEOSException, ValueError) as exc:
        if config.fallback != FALLBACK_HOLE_PUNCH:
            logger.warning("Mask union/difference failed, no mask produced: %s", exc)
            return None
        logger.warning("Mask union/difference failed, falling back to hole-punch mask: %s", exc)
        return hole_punch_mask(polys)

    parts = _polygon_parts(diff)
    if not parts:
        return None

    logger.debug("Exclusion mask: %d region(s) from %d zone(s)", len(parts), len(polys))
    return {
        "type": "FeatureCollection",
        "features": [polygon_feature(part) for part in parts],
    }
