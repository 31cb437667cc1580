"""Public API for the zone exclusion mask."""

from zone_mask.builder import build_exclusion
from zone_mask.cache import MaskState, build_mask_with_timing, feature_collection_hash
from zone_mask.contracts import (
    WORLD_RING,
    MaskBuildResult,
    MaskConfig,
    ZoneType,
)
from zone_mask.rings import normalize_ring, signed_area
from zone_mask.sanitize import sanitize_multipolygon
from zone_mask.store import ZoneStore, filter_zones

__all__ = [
    "WORLD_RING",
    "MaskBuildResult",
    "MaskConfig",
    "MaskState",
    "ZoneStore",
    "ZoneType",
    "build_exclusion",
    "build_mask_with_timing",
    "feature_collection_hash",
    "filter_zones",
    "normalize_ring",
    "sanitize_multipolygon",
    "signed_area",
]
