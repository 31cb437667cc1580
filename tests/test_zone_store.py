"""Tests for the JSON zone store."""

import json

import pytest

from conftest import feature_collection, polygon_feature, rect_ring
from zone_mask.contracts import ZONE_CONFIGS, ZONES_STORAGE_KEY, ZoneType
from zone_mask.store import ZoneStore, filter_zones, is_feature_collection


@pytest.fixture
def store(tmp_path):
    return ZoneStore(tmp_path / "zones.json")


class TestZoneStore:

    def test_missing_file_returns_default(self, store):
        assert store.load() == {"type": "FeatureCollection", "features": []}

    def test_custom_default(self, tmp_path, small_zone):
        store = ZoneStore(tmp_path / "none.json", default=small_zone)
        loaded = store.load()
        assert loaded == small_zone
        loaded["features"].clear()
        assert store.load() == small_zone

    def test_save_then_load(self, store, overlapping_zones):
        store.save(overlapping_zones)
        assert store.load() == overlapping_zones
        document = json.loads(store.path.read_text(encoding="utf-8"))
        assert list(document) == [ZONES_STORAGE_KEY]

    def test_other_keys_preserved(self, store, small_zone):
        store.path.write_text(json.dumps({"other": 1}), encoding="utf-8")
        store.save(small_zone)
        document = json.loads(store.path.read_text(encoding="utf-8"))
        assert document["other"] == 1
        store.clear()
        document = json.loads(store.path.read_text(encoding="utf-8"))
        assert document == {"other": 1}

    def test_corrupt_file_falls_back(self, store, caplog):
        store.path.write_text("{not json", encoding="utf-8")
        with caplog.at_level("ERROR", logger="zone_mask.store"):
            assert store.load() == {"type": "FeatureCollection", "features": []}
        assert "Failed to load saved zones" in caplog.text

    def test_wrong_shape_falls_back(self, store, caplog):
        store.path.write_text(
            json.dumps({ZONES_STORAGE_KEY: {"type": "Feature"}}), encoding="utf-8"
        )
        with caplog.at_level("ERROR", logger="zone_mask.store"):
            assert store.load()["features"] == []
        assert "not a FeatureCollection" in caplog.text

    def test_save_rejects_non_collection(self, store):
        with pytest.raises(ValueError):
            store.save({"type": "Feature"})

    def test_save_over_corrupt_file(self, store, small_zone):
        store.path.write_text("[]", encoding="utf-8")
        store.save(small_zone)
        assert store.load() == small_zone

    def test_listeners_notified(self, store, small_zone):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.save(small_zone)
        store.clear()
        assert seen == [small_zone, None]

        unsubscribe()
        store.save(small_zone)
        assert len(seen) == 2

    def test_clear_missing_file(self, store):
        store.clear()
        assert not store.path.exists()


class TestZoneTypes:

    def test_filter_by_type(self, overlapping_zones):
        danger = filter_zones(overlapping_zones, ZoneType.DANGER)
        assert is_feature_collection(danger)
        assert len(danger["features"]) == 1
        assert danger["features"][0]["properties"]["zoneType"] == "danger"

    def test_untyped_features_dropped(self):
        fc = feature_collection(polygon_feature([rect_ring(0, 0, 1, 1)]))
        assert filter_zones(fc, ZoneType.SUGGESTED)["features"] == []

    def test_none_input(self):
        assert filter_zones(None, ZoneType.DANGER)["features"] == []

    def test_every_type_has_style(self):
        for zone_type in ZoneType:
            style = ZONE_CONFIGS[zone_type]
            assert style.label.endswith("Zone")
            assert 0.0 < style.fill_opacity <= 1.0
