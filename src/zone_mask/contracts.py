"""Contracts for the zone exclusion mask."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

Position = Sequence[float]
Ring = List[List[float]]
PolygonCoords = List[Ring]
MultiPolygonCoords = List[PolygonCoords]

Feature = Mapping[str, Any]
FeatureCollection = Dict[str, Any]
ZoneCollection = Union[Mapping[str, Any], Sequence[Feature], None]

WEB_MERCATOR_MAX_LAT = 85.05112877980659

# Rectangle only, kept minimal for stable overlay triangulation.
WORLD_RING: Ring = [
    [-180.0, -WEB_MERCATOR_MAX_LAT],
    [180.0, -WEB_MERCATOR_MAX_LAT],
    [180.0, WEB_MERCATOR_MAX_LAT],
    [-180.0, WEB_MERCATOR_MAX_LAT],
    [-180.0, -WEB_MERCATOR_MAX_LAT],
]

COLLINEAR_EPS = 1e-12
COORD_DIGITS = 6  # ~0.11 m at the equator

FINGERPRINT_SENTINEL = "null"
ZONES_STORAGE_KEY = "mapland:zones"

FALLBACK_HOLE_PUNCH = "hole_punch"
FALLBACK_NONE = "none"


class ZoneType(Enum):
    """Kinds of zone a user can draw."""
    DANGER = "danger"
    SUGGESTED = "suggested"


@dataclass(frozen=True)
class ZoneStyle:
    label: str
    color: str
    fill_color: str
    fill_opacity: float


ZONE_CONFIGS: Dict[ZoneType, ZoneStyle] = {
    ZoneType.DANGER: ZoneStyle(
        label="Danger Zone",
        color="transparent",
        fill_color="rgba(255, 0, 0, 0.5)",
        fill_opacity=0.5,
    ),
    ZoneType.SUGGESTED: ZoneStyle(
        label="Suggested Zone",
        color="transparent",
        fill_color="rgba(4, 170, 4, 0.5)",
        fill_opacity=0.5,
    ),
}


@dataclass(frozen=True)
class MaskConfig:
    """Configuration for exclusion mask construction."""

    coord_digits: int = COORD_DIGITS
    collinear_eps: float = COLLINEAR_EPS
    # "hole_punch" keeps a degraded mask on engine failure, "none" drops it
    fallback: str = FALLBACK_HOLE_PUNCH


@dataclass
class MaskBuildResult:
    """Outcome of one timed mask build."""

    exclusion: Optional[FeatureCollection]
    duration_ms: float
    changed: bool
    fingerprint: str


def empty_feature_collection() -> FeatureCollection:
    return {"type": "FeatureCollection", "features": []}


def iter_features(zones: ZoneCollection) -> List[Feature]:
    """Return the features of a FeatureCollection, a single Feature or a list."""
    if zones is None:
        return []
    if isinstance(zones, Mapping):
        if zones.get("type") == "Feature":
            return [zones]
        features = zones.get("features")
        if not isinstance(features, Sequence) or isinstance(features, (str, bytes)):
            return []
        return [f for f in features if isinstance(f, Mapping)]
    return [f for f in zones if isinstance(f, Mapping)]
