"""Ring cleanup and winding-order normalization.

A ring is cleaned by dropping consecutive duplicates and collapsing
collinear runs as points are appended, closed, and finally reversed when
its winding does not match the requested one.  Orientation uses the
shoelace signed area: negative means clockwise.
"""

from __future__ import annotations

from typing import List, Sequence

from zone_mask.contracts import COLLINEAR_EPS, Position, Ring


def _same(a: Sequence[float], b: Sequence[float]) -> bool:
    return a[0] == b[0] and a[1] == b[1]


def _triangle_area(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    return 0.5 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))


def _append(cleaned: List[List[float]], pt: Sequence[float], eps: float) -> None:
    """Append *pt* unless it repeats the last point, then collapse collinear tails."""
    if not cleaned or not _same(cleaned[-1], pt):
        cleaned.append([float(pt[0]), float(pt[1])])
    while len(cleaned) >= 3:
        if abs(_triangle_area(cleaned[-3], cleaned[-2], cleaned[-1])) < eps:
            del cleaned[-2]
        else:
            break


def clean_ring(ring: Sequence[Position], eps: float = COLLINEAR_EPS) -> Ring:
    """Remove consecutive duplicates and collinear middle points."""
    cleaned: Ring = []
    for pt in ring:
        _append(cleaned, pt, eps)
    return cleaned


def close_ring(ring: Sequence[Position]) -> Ring:
    out = [[float(p[0]), float(p[1])] for p in ring]
    if len(out) < 2 or _same(out[0], out[-1]):
        return out
    return out + [list(out[0])]


def signed_area(ring: Sequence[Position]) -> float:
    """Shoelace area of a closed ring; negative when clockwise."""
    total = 0.0
    for i in range(len(ring) - 1):
        x1, y1 = ring[i][0], ring[i][1]
        x2, y2 = ring[i + 1][0], ring[i + 1][1]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def is_clockwise(ring: Sequence[Position]) -> bool:
    return signed_area(ring) < 0


def is_degenerate(ring: Sequence[Position]) -> bool:
    """True when the ring has fewer than three distinct vertices."""
    distinct = {(float(p[0]), float(p[1])) for p in ring}
    return len(distinct) < 3


def ensure_orientation(ring: Sequence[Position], clockwise: bool) -> Ring:
    """Close *ring* and reverse it if its winding disagrees with *clockwise*.

    Zero-area rings have no winding and are returned closed but unchanged.
    """
    closed = close_ring(ring)
    area = signed_area(closed)
    if area == 0 or (area < 0) == clockwise:
        return closed
    return closed[::-1]


def normalize_ring(
    ring: Sequence[Position],
    clockwise: bool,
    eps: float = COLLINEAR_EPS,
) -> Ring:
    """Return a closed, deduplicated, collinear-free ring wound as requested.

    The closing point goes through the same collinearity check as every
    other point, so a redundant vertex just before the seam is dropped.
    The result may be degenerate; check with :func:`is_degenerate`.
    """
    cleaned = clean_ring(ring, eps)
    if len(cleaned) >= 2 and not _same(cleaned[0], cleaned[-1]):
        _append(cleaned, cleaned[0], eps)
    return ensure_orientation(cleaned, clockwise)
