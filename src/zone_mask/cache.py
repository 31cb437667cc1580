"""Change detection and timing around :func:`build_exclusion`."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from zone_mask.builder import build_exclusion
from zone_mask.contracts import (
    FINGERPRINT_SENTINEL,
    MaskBuildResult,
    MaskConfig,
    ZoneCollection,
    iter_features,
)

logger = logging.getLogger(__name__)

_HASH_MOD = 2 ** 32


def feature_collection_hash(zones: ZoneCollection) -> str:
    """Order- and representation-sensitive 32-bit hash of zone coordinates.

    Only meant to tell a caller that nothing observably changed; two equal
    shapes listed in a different order hash differently.
    """
    features = iter_features(zones)
    if not features:
        return FINGERPRINT_SENTINEL
    h = 0
    for feature in features:
        geometry = feature.get("geometry")
        if not isinstance(geometry, Mapping):
            continue
        text = json.dumps(geometry.get("coordinates"), separators=(",", ":"))
        for ch in text:
            h = (h * 31 + ord(ch)) % _HASH_MOD
    return format(h, "x")


def build_mask_with_timing(
    zones: ZoneCollection,
    previous_fingerprint: Optional[str],
    config: Optional[MaskConfig] = None,
) -> MaskBuildResult:
    """Build the mask, time it, and report whether the input changed.

    The build always runs; ``changed`` is for the caller to act on.
    """
    started = time.perf_counter()
    exclusion = build_exclusion(zones, config)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    fingerprint = feature_collection_hash(zones)
    result = MaskBuildResult(
        exclusion=exclusion,
        duration_ms=round(elapsed_ms, 2),
        changed=fingerprint != previous_fingerprint,
        fingerprint=fingerprint,
    )
    logger.debug(
        "Mask build %.2f ms (fingerprint %s, changed=%s)",
        result.duration_ms, fingerprint, result.changed,
    )
    return result


@dataclass
class MaskState:
    """Last-seen fingerprint, owned by whoever schedules rebuilds."""

    previous_fingerprint: Optional[str] = None
    config: Optional[MaskConfig] = None

    def rebuild(self, zones: ZoneCollection) -> MaskBuildResult:
        result = build_mask_with_timing(zones, self.previous_fingerprint, self.config)
        self.previous_fingerprint = result.fingerprint
        return result

    def reset(self) -> None:
        self.previous_fingerprint = None
