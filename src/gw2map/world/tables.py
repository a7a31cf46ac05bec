"""Loaders for the static JSON tables written by the offline generators.

File layout inside a data directory (every file optional):

    objectives.json        {"objectives": {map_id: [objective, ...]}}
    extra_layers.json      {"layer_<name>": {..., "data": {map_id: [...]}}}
    sector_names.json      {sector_id: {lang: name}}
    poi_names.json         {poi_type: {poi_id: {lang: name}}}
    heropoint_names.json   {heropoint_id: {lang: name}}
    map_label_coords.json  {map_id: [x, y]}
    guild_upgrades.json    {"i18n_guild_upgrades": {upgrade_id: {name, icon}}}
    worlds.json            {"worlds": {world_id: {"name": {lang: name}}}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from gw2map.world.overrides import Overrides
from gw2map.world.records import ExtraLayer, ObjectiveRecord

_OBJECTIVES = TypeAdapter(dict[int, list[ObjectiveRecord]])
_EXTRA_LAYERS = TypeAdapter(dict[str, ExtraLayer])


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _unwrap(data: Any, wrapper: str) -> Any:
    """Strip the single top-level wrapper key the generators emit."""
    if isinstance(data, dict) and set(data) == {wrapper}:
        return data[wrapper]
    return data


def decode_objectives(data: Mapping | None) -> dict[int, list[ObjectiveRecord]]:
    """Decode an objectives table (wrapped or bare) keyed by map id.

    Raises:
        ValueError: If the table doesn't match the objective schema.
    """
    if not data:
        return {}
    try:
        return _OBJECTIVES.validate_python(_unwrap(data, "objectives"))
    except ValidationError as e:
        raise ValueError(f"Invalid objectives table: {e}") from e


def decode_extra_layers(data: Mapping | None) -> dict[str, ExtraLayer]:
    """Decode a supplementary layer table.

    Keys of the form "layer_<name>" are normalized to "<name>".

    Raises:
        ValueError: If a layer doesn't match the schema.
    """
    if not data:
        return {}
    normalized = {
        (k[len("layer_"):] if k.startswith("layer_") else k): v
        for k, v in data.items()
    }
    try:
        return _EXTRA_LAYERS.validate_python(normalized)
    except ValidationError as e:
        raise ValueError(f"Invalid extra layer table: {e}") from e


def decode_guild_upgrades(data: Mapping | None) -> dict[int, dict]:
    if not data:
        return {}
    return {int(k): v for k, v in _unwrap(data, "i18n_guild_upgrades").items()}


def decode_worlds(data: Mapping | None) -> dict[int, dict]:
    if not data:
        return {}
    return {int(k): v for k, v in _unwrap(data, "worlds").items()}


@dataclass
class StaticTables:
    """Everything the transformer and WvW updater read from disk."""

    objectives: dict[int, list[ObjectiveRecord]] = field(default_factory=dict)
    extra_layers: dict[str, ExtraLayer] = field(default_factory=dict)
    overrides: Overrides = field(default_factory=Overrides)
    guild_upgrades: dict[int, dict] = field(default_factory=dict)
    worlds: dict[int, dict] = field(default_factory=dict)


def load_tables(data_dir: Path | str) -> StaticTables:
    """Load all static tables found in a data directory.

    Missing files yield empty tables. Malformed files raise: a broken
    table is a deployment error, not something to render around.

    Raises:
        FileNotFoundError: If data_dir doesn't exist.
        ValueError: If a table fails to decode.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    def _load(name: str) -> Any:
        path = data_dir / name
        if not path.exists():
            return None
        try:
            return read_json(path)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    label_coords = _load("map_label_coords.json")
    tables = StaticTables(
        objectives=decode_objectives(_load("objectives.json")),
        extra_layers=decode_extra_layers(_load("extra_layers.json")),
        overrides=Overrides.from_tables(
            sector_names=_load("sector_names.json"),
            poi_names=_load("poi_names.json"),
            heropoint_names=_load("heropoint_names.json"),
            map_label_coords=label_coords,
        ),
        guild_upgrades=decode_guild_upgrades(_load("guild_upgrades.json")),
        worlds=decode_worlds(_load("worlds.json")),
    )
    logger.info(
        f"Static tables loaded from {data_dir}: "
        f"{sum(len(v) for v in tables.objectives.values())} objectives, "
        f"{len(tables.extra_layers)} extra layers, "
        f"{len(tables.guild_upgrades)} guild upgrades, "
        f"{len(tables.worlds)} worlds"
    )
    return tables
