"""Compose one map instance: options, layers and live WvW updates.

Usage:
    tables = load_tables(settings.data_dir)
    instance = build_map(response, {"language": "de", "matchup": "2-1"}, tables)
    app.include_router(instance.router())
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import APIRouter
from loguru import logger

from gw2map.api import create_router
from gw2map.config import Settings, settings as default_settings
from gw2map.dataset import MapDataset, parse_dataset
from gw2map.layers.store import FeatureCollectionStore
from gw2map.world.tables import StaticTables
from gw2map.world.transformer import WorldTreeTransformer
from gw2map.wvw.updater import LiveObjectiveUpdater


@dataclass
class MapInstance:
    """A transformed map with its live updater."""

    dataset: MapDataset
    store: FeatureCollectionStore
    updater: LiveObjectiveUpdater

    def router(self) -> APIRouter:
        return create_router(self.store, self.updater)


def resolve_matchup(dataset: MapDataset, options: Settings) -> Optional[str]:
    """The instance's match id wins over the base option."""
    return dataset.matchup or options.matchup


def build_map(
    world_data: Any,
    attributes: Optional[Mapping[str, Any]] = None,
    tables: Optional[StaticTables] = None,
    options: Optional[Settings] = None,
) -> MapInstance:
    """Parse instance attributes, transform world data and wire live updates.

    Live updates for the resolved match start only when called from within
    a running event loop; otherwise call `instance.updater.start_match()`
    once one is running.

    Args:
        world_data: Regions container, region or map response.
        attributes: Raw per-instance attributes (see parse_dataset).
        tables: Static tables; empty tables when omitted.
        options: Base options; the module settings when omitted.

    Raises:
        InvalidResponseShape: If world_data isn't a recognized shape.
    """
    options = options or default_settings
    tables = tables or StaticTables()
    dataset = parse_dataset(attributes, options)

    transformer = WorldTreeTransformer(
        dataset,
        objectives=tables.objectives,
        extra_layers=tables.extra_layers,
        overrides=tables.overrides,
        excluded_objective_maps=options.objective_excluded_maps,
        extra_markers=options.extra_markers,
    )
    store = transformer.transform(world_data)

    updater = LiveObjectiveUpdater(
        options,
        guild_upgrades=tables.guild_upgrades,
        language=dataset.language,
        worlds=tables.worlds,
    )
    updater.register(store)

    matchup = resolve_matchup(dataset, options)
    if matchup:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, live updates for match {matchup} not started")
        else:
            updater.start_match(matchup)

    return MapInstance(dataset=dataset, store=store, updater=updater)
