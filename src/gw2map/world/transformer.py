"""WorldTreeTransformer -- flatten a floor/region API response into map layers.

Walks region -> map -> {sectors, points of interest, hero points, WvW
objectives, supplementary layers} depth-first in source key order and
emits one LayerFeature per item into a FeatureCollectionStore. This is a
polyfill for the GeoJSON output the API never got
(https://github.com/arenanet/api-cdi/pull/62).

Accepted roots:
    {region_id: region, ...}   regions container (floor "regions" object)
    {"maps": {...}, ...}       a single region
    {"points_of_interest": ...} a single map
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from gw2map.dataset import MapDataset
from gw2map.layers.layer import LayerFeature
from gw2map.layers.store import FeatureCollectionStore
from gw2map.world.overrides import Overrides
from gw2map.world.records import (
    ExtraLayer,
    HeroPointRecord,
    MapRecord,
    ObjectiveRecord,
    PoiRecord,
    RegionRecord,
    SectorRecord,
)
from gw2map.world.rect import ContinentRect
from gw2map.world.tables import decode_extra_layers, decode_objectives

# spawn labels are moved up so they don't overlap the sector label
SPAWN_LABEL_OFFSET = 40

_ANT_PATH_FIELDS = ("antPath", "antColor", "antOpacity", "antDashArray")


class InvalidResponseShape(ValueError):
    """The world-data root matches none of the recognized shapes."""


def localize(name: Any, lang: str) -> str:
    """Pick the configured language from a language-keyed name."""
    if isinstance(name, Mapping):
        return name.get(lang) or ""
    return name or ""


class WorldTreeTransformer:
    """Transforms a world-data response into per-layer feature collections.

    Usage:
        transformer = WorldTreeTransformer(dataset, objectives=tables.objectives)
        store = transformer.transform(response)
    """

    def __init__(
        self,
        dataset: MapDataset,
        objectives: Optional[Mapping] = None,
        extra_layers: Optional[Mapping] = None,
        overrides: Optional[Overrides] = None,
        excluded_objective_maps: Iterable[int] = (),
        extra_markers: Optional[Iterable[str]] = None,
    ) -> None:
        self.dataset = dataset
        self.language = dataset.language
        self.objectives = _ensure_objectives(objectives)
        self.extra_layers = _ensure_extra_layers(extra_layers)
        self.overrides = overrides or Overrides()
        self.excluded_objective_maps = frozenset(excluded_objective_maps)

        # no explicit selection: every supplementary layer we have data for
        if dataset.extra_layers:
            selected = list(extra_markers or ()) + list(dataset.extra_layers)
        else:
            selected = list(self.extra_layers)
        self.selected_layers: list[str] = list(dict.fromkeys(selected))

        self._store: FeatureCollectionStore | None = None

    # -- entry point ----------------------------------------------------------

    def transform(self, world_data: Any) -> FeatureCollectionStore:
        """Transform a world-data response into a new store.

        Raises:
            InvalidResponseShape: If the root isn't a regions container,
                region or map, or a record inside it fails to decode.
        """
        if not isinstance(world_data, Mapping) or not world_data:
            raise InvalidResponseShape("invalid API response: expected a non-empty object")

        self._store = FeatureCollectionStore()
        try:
            if "maps" in world_data:
                self._region(_decode(RegionRecord, world_data))
            elif "points_of_interest" in world_data:
                self._map(_decode(MapRecord, world_data))
            elif all(isinstance(v, Mapping) and "maps" in v for v in world_data.values()):
                for region in world_data.values():
                    self._region(_decode(RegionRecord, region))
            else:
                raise InvalidResponseShape("invalid API response: unrecognized root object")

            store = self._store
        finally:
            self._store = None

        logger.info(
            f"World data transformed: {len(store.keys())} layers, "
            f"{sum(len(layer) for layer in store.layers())} features, "
            f"{len(store.map_rects)} maps ({self.language})"
        )
        return store

    # -- emit -------------------------------------------------------------------

    def _add_feature(
        self,
        layer: str,
        feature_id,
        map_id: Optional[int],
        name: Any,
        properties: dict,
        coordinates: Any,
        geometry_type: str = "Point",
    ) -> LayerFeature:
        props = {
            "name": localize(name, self.language),
            "mapID": map_id,
            "layertype": "icon",
        }
        props.update(properties)
        return self._store.upsert(layer, LayerFeature(
            feature_id=feature_id,
            geometry_type=geometry_type,
            coordinates=coordinates,
            properties=props,
        ))

    # -- traversal --------------------------------------------------------------

    def _region(self, region: RegionRecord) -> None:
        if region.label_coord:
            self._add_feature("region_label", region.id, None, region.name, {
                "type": "region",
                "layertype": "label",
            }, list(region.label_coord))

        for map_key, map_record in region.maps.items():
            self._map(map_record, _int_id(map_key, map_record.id))

    def _map(self, map_record: MapRecord, map_id: Optional[int] = None) -> None:
        if map_id is None:
            map_id = map_record.id

        rect = ContinentRect(map_record.continent_rect, map_record.map_rect)
        self._store.map_rects[map_id] = rect

        self._add_feature("map_label", map_id, map_id, map_record.name, {
            "min_level": map_record.min_level,
            "max_level": map_record.max_level,
            "type": "map",
            "layertype": "label",
        }, self._map_label_coord(map_record, map_id, rect))

        self._sectors(map_record.sectors, map_id)
        self._pois(map_record.points_of_interest, map_id)
        self._heropoints(map_record.skill_challenges, map_id)

        if map_id in self.objectives and map_id not in self.excluded_objective_maps:
            self._objectives(self.objectives[map_id], map_id)

        for layer in self.selected_layers:
            extra = self.extra_layers.get(layer)
            if extra is not None and map_id in extra.data:
                self._extra(extra, layer, map_id)

    def _map_label_coord(self, map_record: MapRecord, map_id: int, rect: ContinentRect) -> list:
        override = self.overrides.map_label_coord(map_id)
        if override is not None:
            return override

        # e.g. Labyrinthine Cliffs (922) has its label at [0, 0]
        coord = map_record.label_coord
        if not coord or len(coord) < 2 or coord[0] == 0 or coord[1] == 0:
            return rect.center()
        return list(coord)

    def _sectors(self, sectors: Mapping[str, SectorRecord], map_id: int) -> None:
        for sector in sectors.values():
            # custom names for wiki disambiguation
            name = self.overrides.sector_name(sector.id, self.language) or sector.name

            self._add_feature("sector_label", sector.id, map_id, name, {
                "chat_link": sector.chat_link,
                "level": sector.level,
                "type": "sector",
                "layertype": "label",
            }, list(sector.coord))

            self._add_feature("sector_poly", sector.id, map_id, name, {
                "type": "sector",
                "layertype": "poly",
            }, [[list(p) for p in sector.bounds]], "Polygon")

    def _pois(self, pois: Mapping[str, PoiRecord], map_id: int) -> None:
        for poi in pois.values():
            name = (
                self.overrides.poi_name(poi.type, poi.id, self.language)
                or localize(poi.name, self.language)
                or (str(poi.id) if poi.id is not None else "")
            )

            self._add_feature(f"{poi.type}_icon", poi.id, map_id, name, {
                "type": poi.type,
                "chat_link": poi.chat_link or False,
                "icon": poi.icon,
            }, list(poi.coord))

    def _heropoints(self, heropoints: list[HeroPointRecord], map_id: int) -> None:
        # the API doesn't return hero point names (api-cdi#329)
        for heropoint in heropoints:
            name = self.overrides.heropoint_name(heropoint.id, self.language) or ""

            self._add_feature("heropoint_icon", heropoint.id, map_id, name, {
                "type": "heropoint",
            }, list(heropoint.coord))

    def _objectives(self, objectives: list[ObjectiveRecord], map_id: int) -> None:
        for objective in objectives:
            if objective.type == "spawn":
                coord = objective.label_coord or objective.coord
                if not coord:
                    logger.debug(f"Spawn objective {objective.id} has no label coordinate")
                    continue
                label_coord = [coord[0], coord[1] - SPAWN_LABEL_OFFSET]

                self._add_feature("map_label", objective.id, map_id, objective.name, {
                    "type": objective.type,
                    "sector": objective.sector_id,
                    "layertype": "label",
                }, label_coord)
                continue

            if not objective.coord:
                logger.debug(f"Objective {objective.id} has no coordinate")
                continue

            self._add_feature("objective_icon", objective.id, map_id, objective.name, {
                "type": objective.type,
                "sector": objective.sector_id,
                "chat_link": objective.chat_link,
            }, list(objective.coord))

    def _extra(self, extra: ExtraLayer, layer: str, map_id: int) -> None:
        for entry in extra.data[map_id]:
            options = {
                "type": entry.type or extra.type,
                "layertype": entry.layertype or extra.layertype or "icon",
                "icon": entry.icon or extra.icon or None,
                "className": entry.className or extra.className,
                "color": entry.color or extra.color,
                "description": entry.description or extra.description or None,
            }

            if entry.antPath or extra.antPath:
                for key in _ANT_PATH_FIELDS:
                    options[key] = getattr(entry, key) or getattr(extra, key)

            self._add_feature(
                layer,
                entry.id,
                map_id,
                entry.name or extra.name,
                options,
                entry.coord,
                entry.featureType or extra.featureType or "Point",
            )


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _decode(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidResponseShape(f"invalid API response: {e}") from e


def _int_id(key: str, fallback: Optional[int]) -> Optional[int]:
    try:
        return int(key)
    except (TypeError, ValueError):
        return fallback


def _ensure_objectives(objectives: Optional[Mapping]) -> dict[int, list[ObjectiveRecord]]:
    if not objectives:
        return {}
    first = next(iter(objectives.values()), None)
    if isinstance(first, list) and first and isinstance(first[0], ObjectiveRecord):
        return dict(objectives)
    return decode_objectives(objectives)


def _ensure_extra_layers(extra_layers: Optional[Mapping]) -> dict[str, ExtraLayer]:
    if not extra_layers:
        return {}
    if all(isinstance(v, ExtraLayer) for v in extra_layers.values()):
        return dict(extra_layers)
    return decode_extra_layers(extra_layers)
