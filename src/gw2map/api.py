"""HTTP surface for the renderer -- layer GeoJSON, map rects, live match, worlds.

The router is built around an already transformed store; it never
fetches world data itself.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException
from loguru import logger
from pydantic import BaseModel

from gw2map.layers.exporters.geojson import export_geojson
from gw2map.layers.store import FeatureCollectionStore
from gw2map.wvw.matches import world_choices
from gw2map.wvw.updater import LiveObjectiveUpdater


class LayerSummary(BaseModel):
    """One entry of the layer listing."""
    key: str
    features: int


class WorldChoice(BaseModel):
    """A world and the match it currently plays in."""
    world_id: int
    match: str
    color: str
    name: str


class MatchRequest(BaseModel):
    """Switch live updates to a match ("none" stops them)."""
    matchup: Optional[str] = None


def create_router(
    store: FeatureCollectionStore,
    updater: Optional[LiveObjectiveUpdater] = None,
) -> APIRouter:
    """Build the /api/map router for a store and optional live updater."""
    router = APIRouter(prefix="/api/map", tags=["map"])

    @router.get("/layers", response_model=list[LayerSummary])
    async def list_layers():
        """Non-empty layers in render order."""
        return [LayerSummary(key=layer.key, features=len(layer)) for layer in store.layers()]

    @router.get("/layers/{layer_key}")
    async def get_layer(layer_key: str):
        """One layer as a GeoJSON FeatureCollection."""
        if layer_key not in store:
            raise HTTPException(status_code=404, detail=f"Layer not found: {layer_key}")
        return export_geojson(store.get(layer_key))

    @router.get("/rects/{map_id}")
    async def get_rect(map_id: int):
        """Continent rectangle of a map, for tile alignment."""
        rect = store.map_rects.get(map_id)
        if rect is None:
            raise HTTPException(status_code=404, detail=f"Map not found: {map_id}")
        return rect.to_dict()

    @router.get("/match")
    async def get_match():
        """Live updater status."""
        if updater is None:
            return {"match": None, "running": False}
        return updater.stats

    @router.post("/match")
    async def set_match(body: MatchRequest):
        """Start, switch or stop live objective updates."""
        if updater is None:
            raise HTTPException(status_code=409, detail="Live updates are not enabled")
        matchup = body.matchup
        if matchup and matchup.lower() != "none" and updater.matches and matchup not in updater.matches:
            raise HTTPException(status_code=404, detail=f"Match not found: {matchup}")
        updater.start_match(matchup)
        logger.info(f"Live match set to {updater.current_match}")
        return updater.stats

    @router.get("/worlds", response_model=list[WorldChoice])
    async def list_worlds(refresh: bool = False):
        """Worlds sorted by name with their current match, for a world selector."""
        if updater is None:
            raise HTTPException(status_code=409, detail="Live updates are not enabled")
        if refresh or not updater.match_worlds:
            await updater.load_matches()
        return [WorldChoice(**asdict(w)) for w in world_choices(updater.match_worlds)]

    return router
