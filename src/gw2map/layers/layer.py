"""Layer and LayerFeature dataclasses for the map feature collections.

Coordinates stay in the game's native continent pixel space: [x, y] with
y growing downwards. Projection to screen/lat-lng is the renderer's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LayerFeature:
    """A single feature (point or polygon) within a layer.

    Attributes:
        feature_id: Identifier, unique within its layer. Sector, map and
            POI ids are integers; hero points and objectives use string
            ids like "0-12" or "38-6".
        geometry_type: One of "Point", "Polygon" (supplementary layers may
            also carry "LineString").
        coordinates: GeoJSON-style coordinate arrays.
            Point: [x, y]
            Polygon: [[[x, y], [x, y], ...]]  (one outer ring)
        properties: name, mapID, type, layertype and layer specific fields.
        style: Live state descriptor (owner colour, tier) written by the
            WvW updater. None until the first update.
    """

    feature_id: str | int | None
    geometry_type: str
    coordinates: list
    properties: dict
    style: dict | None = None


@dataclass
class Layer:
    """An ordered, upsertable collection of features for one layer key.

    Attributes:
        key: Layer key, e.g. "map_label", "sector_poly", "waypoint_icon".
        features: LayerFeature instances in insertion order.
        metadata: Arbitrary key-value metadata about the layer.
    """

    key: str
    features: list[LayerFeature] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def upsert(self, feature: LayerFeature) -> LayerFeature:
        """Replace the feature with the same id in place, else append it.

        Features without an id are always appended.
        """
        if feature.feature_id is None:
            self.features.append(feature)
            return feature
        for idx, existing in enumerate(self.features):
            if existing.feature_id == feature.feature_id:
                self.features[idx] = feature
                return feature
        self.features.append(feature)
        return feature

    def get(self, feature_id) -> LayerFeature | None:
        for feature in self.features:
            if feature.feature_id == feature_id:
                return feature
        return None

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self):
        return iter(self.features)
