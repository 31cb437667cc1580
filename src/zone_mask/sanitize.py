"""Coordinate rounding to absorb reprojection jitter.

Rounding runs after ring normalization.  Two neighbouring vertices that
differ only below the rounding step come out equal, so a sanitized ring is
not guaranteed to be free of duplicates; the boolean engine tolerates that.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from zone_mask.contracts import COORD_DIGITS, MultiPolygonCoords, Position, Ring


def round_coord(value: float, digits: int = COORD_DIGITS) -> float:
    return float(np.round(float(value), digits))


def sanitize_ring(ring: Sequence[Position], digits: int = COORD_DIGITS) -> Ring:
    if len(ring) == 0:
        return []
    coords = np.asarray([(p[0], p[1]) for p in ring], dtype=float)
    return np.round(coords, digits).tolist()


def sanitize_multipolygon(
    mp: Sequence[Sequence[Sequence[Position]]],
    digits: int = COORD_DIGITS,
) -> MultiPolygonCoords:
    """Round every ring of every polygon independently."""
    return [[sanitize_ring(ring, digits) for ring in polygon] for polygon in mp]
