"""Map feature collections -- per-layer features and GeoJSON export."""

from gw2map.layers.layer import Layer, LayerFeature
from gw2map.layers.store import LAYER_ORDER, FeatureCollectionStore

__all__ = ["LAYER_ORDER", "FeatureCollectionStore", "Layer", "LayerFeature"]
