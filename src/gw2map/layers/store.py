"""FeatureCollectionStore -- ordered registry of per-layer feature collections.

Collections are created on first use. The main overlays keep a fixed
relative order (icons above labels above polygons when rendered in
order); any other layer key is appended in first-use order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gw2map.layers.layer import Layer, LayerFeature

if TYPE_CHECKING:
    from gw2map.world.rect import ContinentRect

# fixed sort order for the main overlays
LAYER_ORDER = (
    "objective_icon",
    "landmark_icon",
    "waypoint_icon",
    "heropoint_icon",
    "vista_icon",
    "jumpingpuzzle_icon",
    "region_label",
    "map_label",
    "sector_label",
    "sector_poly",
)


class FeatureCollectionStore:
    """Registry of feature collections keyed by layer key."""

    def __init__(self) -> None:
        self._layers: dict[str, Layer | None] = dict.fromkeys(LAYER_ORDER)
        # map id -> ContinentRect, consumed by the renderer for tile alignment
        self.map_rects: dict[int, ContinentRect] = {}

    def upsert(self, layer_key: str, feature: LayerFeature) -> LayerFeature:
        """Add a feature to a layer, replacing one with the same id.

        Args:
            layer_key: Layer to add to; created on first use.
            feature: The feature to store.

        Returns:
            The stored feature.
        """
        layer = self._layers.get(layer_key)
        if layer is None:
            layer = Layer(key=layer_key)
            self._layers[layer_key] = layer
        return layer.upsert(feature)

    def get(self, layer_key: str) -> Layer:
        """Get a layer by key.

        Returns:
            The Layer if it holds features, otherwise an empty Layer that
            is not registered in the store.
        """
        layer = self._layers.get(layer_key)
        if layer is None:
            return Layer(key=layer_key)
        return layer

    def find(self, layer_key: str, feature_id) -> LayerFeature | None:
        """Look up a single feature by layer key and identifier."""
        layer = self._layers.get(layer_key)
        if layer is None:
            return None
        return layer.get(feature_id)

    def keys(self) -> list[str]:
        """Keys of all non-empty layers, fixed layers first."""
        return [key for key, layer in self._layers.items() if layer]

    def layers(self) -> list[Layer]:
        """All non-empty layers, fixed layers first."""
        return [layer for layer in self._layers.values() if layer]

    def __contains__(self, layer_key: str) -> bool:
        return bool(self._layers.get(layer_key))

    def to_geojson(self) -> dict[str, dict]:
        """Export every non-empty layer to a GeoJSON FeatureCollection dict."""
        from gw2map.layers.exporters.geojson import export_geojson

        return {layer.key: export_geojson(layer) for layer in self.layers()}
