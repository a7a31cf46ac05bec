"""Export a Layer to a GeoJSON FeatureCollection dict (RFC 7946 shaped).

Coordinates are exported as-is in continent pixel space; the consumer
supplies the CRS (a simple/flat CRS in the renderer).
"""

from __future__ import annotations

from gw2map.layers.layer import Layer, LayerFeature


def export_geojson(layer: Layer) -> dict:
    """Export a Layer to a GeoJSON FeatureCollection dict.

    Args:
        layer: The Layer to export.

    Returns:
        Dict representing a GeoJSON FeatureCollection.
    """
    features = []
    for feature in layer.features:
        gj_feature = _feature_to_geojson(feature)
        features.append(gj_feature)

    return {
        "type": "FeatureCollection",
        "features": features,
    }


def _feature_to_geojson(feature: LayerFeature) -> dict:
    """Convert a LayerFeature to a GeoJSON Feature dict."""
    properties = dict(feature.properties)
    # the renderer looks the id up from the properties as well
    properties.setdefault("id", feature.feature_id)

    gj = {
        "type": "Feature",
        "id": feature.feature_id,
        "geometry": {
            "type": feature.geometry_type,
            "coordinates": feature.coordinates,
        },
        "properties": properties,
    }
    if feature.style:
        gj["style"] = dict(feature.style)
    return gj
