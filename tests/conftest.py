"""
Shared fixtures for exclusion mask tests.
"""
import json
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zone_mask.contracts import WEB_MERCATOR_MAX_LAT


def rect_ring(x0, y0, x1, y1):
    """Closed counter-clockwise rectangle ring."""
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]


def polygon_feature(rings, **properties):
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": rings},
    }


def feature_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


WORLD_AREA = 360.0 * 2.0 * WEB_MERCATOR_MAX_LAT


@pytest.fixture
def small_zone():
    """A 10x10 degree square off the coast of Africa."""
    return feature_collection(polygon_feature([rect_ring(0, 0, 10, 10)]))


@pytest.fixture
def overlapping_zones():
    """Two 10x10 squares sharing a 5x5 corner (union area 175)."""
    return feature_collection(
        polygon_feature([rect_ring(0, 0, 10, 10)], zoneType="danger"),
        polygon_feature([rect_ring(5, 5, 15, 15)], zoneType="suggested"),
    )


@pytest.fixture
def barcelona_zone():
    """Hand-drawn city outline with reprojection noise in the coordinates."""
    ring = [
        [2.1307445004966894, 41.32323708040718],
        [2.1475641746392284, 41.3525684844455],
        [2.1667872724434005, 41.36232471969146],
        [2.179744566907459, 41.37974120083419],
        [2.1926449777269283, 41.386573059480554],
        [2.222286114009364, 41.411569038770125],
        [2.2180387435725777, 41.42312244772094],
        [2.2062437466533993, 41.43964870716289],
        [2.1989833194216715, 41.44643270690179],
        [2.1889615402737945, 41.44616780959015],
        [2.176243579390814, 41.442733324939525],
        [2.15124638788663, 41.43659525375509],
        [2.141640714469446, 41.419707001797775],
        [2.138645395066021, 41.41498465955769],
        [2.1347525358199277, 41.413861961351756],
        [2.120004077797148, 41.40460845521855],
        [2.1047122121409245, 41.38412145245863],
        [2.0902404659010188, 41.36191411654991],
        [2.102612589651983, 41.341698175257164],
        [2.1307445004966894, 41.32323708040718],
    ]
    return feature_collection(polygon_feature([ring], zoneType="suggested"))


@pytest.fixture
def zones_file(tmp_path, overlapping_zones):
    path = tmp_path / "zones.geojson"
    path.write_text(json.dumps(overlapping_zones), encoding="utf-8")
    return path
