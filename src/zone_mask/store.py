"""JSON-file key/value store for the zone collection.

One document per file, zones kept under a fixed key.  Saving or clearing
notifies subscribed listeners with the new collection (``None`` on clear).
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from zone_mask.contracts import (
    ZONES_STORAGE_KEY,
    FeatureCollection,
    ZoneType,
    empty_feature_collection,
    iter_features,
)

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[FeatureCollection]], None]


def is_feature_collection(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and value.get("type") == "FeatureCollection"
        and isinstance(value.get("features"), list)
    )


def filter_zones(fc: Optional[FeatureCollection], zone_type: ZoneType) -> FeatureCollection:
    """Keep only features whose ``zoneType`` property matches."""
    kept = []
    for feature in iter_features(fc):
        props = feature.get("properties") or {}
        if props.get("zoneType") == zone_type.value:
            kept.append(feature)
    return {"type": "FeatureCollection", "features": kept}


class ZoneStore:
    """Persist a FeatureCollection under a fixed key in a JSON file."""

    def __init__(
        self,
        path: Path,
        key: str = ZONES_STORAGE_KEY,
        default: Optional[FeatureCollection] = None,
    ):
        self.path = Path(path)
        self.key = key
        self._default = default if default is not None else empty_feature_collection()
        self._listeners: List[Listener] = []

    @property
    def default(self) -> FeatureCollection:
        return copy.deepcopy(self._default)

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        document = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError(f"Store document is not an object: {self.path}")
        return document

    def _write_document(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)

    def load(self) -> FeatureCollection:
        """Stored zones, or the default when missing or unreadable."""
        try:
            document = self._read_document()
        except (OSError, ValueError) as exc:
            logger.error("Failed to load saved zones from %s: %s", self.path, exc)
            return self.default
        value = document.get(self.key)
        if value is None:
            return self.default
        if not is_feature_collection(value):
            logger.error("Saved zones under %r are not a FeatureCollection", self.key)
            return self.default
        return value

    def save(self, fc: FeatureCollection) -> None:
        if not is_feature_collection(fc):
            raise ValueError("Zones must be a GeoJSON FeatureCollection")
        try:
            document = self._read_document()
        except ValueError as exc:
            logger.warning("Overwriting unreadable zone store %s: %s", self.path, exc)
            document = {}
        document[self.key] = fc
        self._write_document(document)
        logger.info("Saved %d zone(s) to %s", len(fc["features"]), self.path)
        self._notify(fc)

    def clear(self) -> None:
        try:
            document = self._read_document()
        except ValueError:
            document = {}
        if self.key in document:
            del document[self.key]
            self._write_document(document)
        self._notify(None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a zones-updated listener; returns its unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, fc: Optional[FeatureCollection]) -> None:
        for listener in list(self._listeners):
            listener(fc)
