"""Manual corrections applied on top of the API data.

Names: the wiki uses disambiguated article names for some sectors, POIs
and hero points, and the API omits hero point names entirely. Map label
coordinates: a few maps come back with bad label positions.

All tables are read-only nested mappings, injected into the transformer
so tests can supply synthetic sets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


def freeze(table: Mapping | None) -> Mapping:
    """Deep-copy a nested mapping into read-only MappingProxyType levels."""
    if not table:
        return MappingProxyType({})
    return MappingProxyType({
        _key(k): freeze(v) if isinstance(v, Mapping) else v
        for k, v in table.items()
    })


def _key(k: Any) -> Any:
    # JSON object keys are always strings; ids are ints where they look like ints
    if isinstance(k, str) and k.isdigit():
        return int(k)
    return k


# Obsidian Sanctum is labelled weirdly within Eternal Battlegrounds
MAP_LABEL_COORDS: Mapping[int, tuple[int, int]] = MappingProxyType({
    899: (11500, 13400),
})


def _empty() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class Overrides:
    """Lookup tables for names and label coordinates.

    Attributes:
        sector_names: sector id -> language -> name
        poi_names: poi type -> poi id -> language -> name
        heropoint_names: hero point id -> language -> name
        map_label_coords: map id -> [x, y]
    """

    sector_names: Mapping = field(default_factory=_empty)
    poi_names: Mapping = field(default_factory=_empty)
    heropoint_names: Mapping = field(default_factory=_empty)
    map_label_coords: Mapping = field(default_factory=lambda: MAP_LABEL_COORDS)

    @classmethod
    def from_tables(
        cls,
        sector_names: Mapping | None = None,
        poi_names: Mapping | None = None,
        heropoint_names: Mapping | None = None,
        map_label_coords: Mapping | None = None,
    ) -> "Overrides":
        """Build from plain (e.g. JSON-decoded) nested dicts."""
        return cls(
            sector_names=freeze(sector_names),
            poi_names=freeze(poi_names),
            heropoint_names=freeze(heropoint_names),
            map_label_coords=freeze({**MAP_LABEL_COORDS, **(map_label_coords or {})}),
        )

    def sector_name(self, sector_id: int, lang: str) -> Optional[str]:
        return self.sector_names.get(sector_id, {}).get(lang)

    def poi_name(self, poi_type: str, poi_id, lang: str) -> Optional[str]:
        return self.poi_names.get(poi_type, {}).get(_key(poi_id), {}).get(lang)

    def heropoint_name(self, heropoint_id, lang: str) -> Optional[str]:
        return self.heropoint_names.get(heropoint_id, {}).get(lang)

    def map_label_coord(self, map_id: int) -> Optional[list[float]]:
        coord = self.map_label_coords.get(map_id)
        return list(coord) if coord is not None else None
