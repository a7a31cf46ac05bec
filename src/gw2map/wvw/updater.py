"""LiveObjectiveUpdater -- keep WvW objective features in sync with a match.

Polls /v2/wvw/matches/:id every `match_refresh` seconds and mutates the
already materialized objective and sector features in place: owner
colour and tier on the objective icon, a textual summary for its popup,
and the owner colour on the objective's sector polygon.

Claiming guilds are looked up on demand and cached; a lookup started
during one tick is only visible from the next tick on.

Usage:
    updater = LiveObjectiveUpdater(settings, guild_upgrades=tables.guild_upgrades)
    updater.register(store)
    updater.start_match("2-1")     # inside a running event loop
    ...
    updater.start_match("none")    # stop polling
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from gw2map.config import Settings, settings as default_settings
from gw2map.layers.layer import LayerFeature
from gw2map.layers.store import FeatureCollectionStore
from gw2map.wvw.executor import PeriodicExecutor
from gw2map.wvw.guilds import GuildCache, GuildInfo
from gw2map.wvw.matches import MatchWorld, assign_match_worlds, matches_by_id
from gw2map.wvw.state import MatchSnapshot, ObjectiveState

_DISABLED = ("", "none")


class LiveObjectiveUpdater:
    """Applies live match state to objective and sector features."""

    def __init__(
        self,
        options: Settings | None = None,
        guild_upgrades: Optional[Mapping[int, Mapping]] = None,
        language: Optional[str] = None,
        worlds: Optional[Mapping[int, Mapping]] = None,
    ) -> None:
        self.options = options or default_settings
        self.language = language or self.options.lang
        self.guild_upgrades = guild_upgrades or {}
        self.worlds = worlds or {}
        self.guilds = GuildCache()

        # back-references into features owned by the store
        self.objectives: dict[str, LayerFeature] = {}
        self.sectors: dict[int, LayerFeature] = {}

        self.matches: dict[str, Mapping] = {}
        self.match_worlds: dict[int, MatchWorld] = {}

        self.current_match: Optional[str] = None
        self._executor: Optional[PeriodicExecutor] = None
        self._pending_guilds: set[str] = set()
        self._guild_tasks: set[asyncio.Task] = set()

        self._tick_count = 0
        self._last_error = ""

    # -- registration -----------------------------------------------------------

    def register(self, store: FeatureCollectionStore) -> int:
        """Track the WvW objective and sector features held by a store.

        Home sectors are never tracked: they keep their team colour.

        Returns:
            Number of objectives tracked.
        """
        wvw_maps = set(self.options.wvw_maps)
        home_sectors = set(self.options.home_sectors)

        for feature in store.get("objective_icon"):
            if feature.properties.get("mapID") in wvw_maps:
                self.objectives[feature.feature_id] = feature

        for feature in store.get("sector_poly"):
            if feature.properties.get("mapID") not in wvw_maps:
                continue
            if feature.feature_id in home_sectors:
                continue
            self.sectors[feature.feature_id] = feature

        logger.info(
            f"WvW updater tracking {len(self.objectives)} objectives, "
            f"{len(self.sectors)} sectors"
        )
        return len(self.objectives)

    # -- lifecycle --------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._executor is not None and self._executor.running

    @property
    def stats(self) -> dict:
        return {
            "match": self.current_match,
            "running": self.running,
            "ticks": self._tick_count,
            "objectives": len(self.objectives),
            "sectors": len(self.sectors),
            "guilds_cached": len(self.guilds),
            "last_error": self._last_error,
        }

    def start_match(self, matchup: Optional[str]) -> None:
        """Switch live updates to another match.

        The same match as the active one is a no-op; None, "" or "none"
        stops polling. Must be called from within a running event loop.
        """
        if matchup is not None and matchup.lower() in _DISABLED:
            matchup = None

        if matchup is not None and matchup == self.current_match and self.running:
            return

        self.stop()

        if matchup is None:
            return

        self.current_match = matchup
        self._executor = PeriodicExecutor(
            lambda: self._tick(matchup),
            self.options.match_refresh,
            name=f"match-{matchup}",
        )
        self._executor.start()
        logger.info(f"WvW updater started for match {matchup} (every {self.options.match_refresh}s)")

    def stop(self) -> None:
        """Stop polling. In-flight ticks and guild lookups still complete."""
        if self._executor is not None:
            self._executor.stop()
            self._executor = None
            logger.info(f"WvW updater stopped for match {self.current_match}")
        self.current_match = None

    # -- network ----------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"base_url": self.options.api_base}
        if self.options.http_timeout is not None:
            kwargs["timeout"] = self.options.http_timeout
        return httpx.AsyncClient(**kwargs)

    async def _get_json(self, path: str) -> Any:
        async with self._client() as client:
            resp = await client.get(path)
            resp.raise_for_status()
        return resp.json()

    async def _tick(self, matchup: str) -> None:
        """One poll: fetch the match, apply it, queue guild lookups."""
        self._tick_count += 1
        try:
            snapshot = await self._get_json(f"/v2/wvw/matches/{matchup}")
            missing = self.apply_snapshot(snapshot)
        except (httpx.HTTPError, ValueError) as e:
            self._last_error = str(e)
            logger.warning(f"WvW match {matchup} update failed: {e}")
            return

        for guild_id in missing:
            self._schedule_guild_lookup(guild_id)

    def _schedule_guild_lookup(self, guild_id: str) -> None:
        if guild_id in self.guilds or guild_id in self._pending_guilds:
            return
        self._pending_guilds.add(guild_id)
        task = asyncio.get_running_loop().create_task(self.fetch_guild(guild_id))
        self._guild_tasks.add(task)
        task.add_done_callback(self._guild_tasks.discard)

    async def fetch_guild(self, guild_id: str) -> Optional[GuildInfo]:
        """Look up a guild and cache its name and tag."""
        try:
            data = await self._get_json(f"/v2/guild/{guild_id}")
            return self.guilds.add(guild_id, GuildInfo(name=data["name"], tag=data["tag"]))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Guild lookup {guild_id} failed: {e}")
            return None
        finally:
            self._pending_guilds.discard(guild_id)

    async def load_matches(self, worlds: Optional[Mapping] = None) -> dict[int, MatchWorld]:
        """Fetch the matches overview and assign worlds to matches.

        Args:
            worlds: World table for names; defaults to the one given at
                construction.

        Returns:
            world id -> MatchWorld. On failure the previous assignment.
        """
        try:
            overview = await self._get_json("/v2/wvw/matches/overview?ids=all")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"WvW matches overview failed: {e}")
            return self.match_worlds
        self.matches = matches_by_id(overview)
        self.match_worlds = assign_match_worlds(overview, worlds or self.worlds, self.language)
        logger.info(f"WvW overview: {len(self.matches)} matches, {len(self.match_worlds)} worlds")
        return self.match_worlds

    async def wait_idle(self) -> None:
        """Wait for the in-flight tick and guild lookups."""
        if self._executor is not None:
            await self._executor.wait_idle()
        if self._guild_tasks:
            await asyncio.gather(*list(self._guild_tasks), return_exceptions=True)

    # -- apply ------------------------------------------------------------------

    def apply_snapshot(self, snapshot: Mapping) -> set[str]:
        """Apply a match snapshot to the tracked features.

        Args:
            snapshot: A /v2/wvw/matches/:id response.

        Returns:
            Claiming guild ids that are not cached yet.

        Raises:
            ValueError: If the snapshot doesn't decode.
        """
        try:
            match = MatchSnapshot.model_validate(snapshot)
        except ValidationError as e:
            raise ValueError(f"Invalid match snapshot: {e}") from e

        missing: set[str] = set()
        colors = self.options.sector_colors
        home_sectors = set(self.options.home_sectors)

        for match_map in match.maps:
            for objective in match_map.objectives:
                feature = self.objectives.get(objective.id)
                if feature is None:
                    continue

                if objective.claimed_by and objective.claimed_by not in self.guilds:
                    missing.add(objective.claimed_by)

                state = ObjectiveState.from_snapshot(objective)
                props = feature.properties
                feature.style = state.style(props.get("type", ""))
                props["live"] = state.summary(
                    props.get("name", ""), self.guilds, self.guild_upgrades, self.language
                )

                sector_id = props.get("sector")
                if sector_id in home_sectors:
                    continue
                sector = self.sectors.get(sector_id)
                if sector is not None:
                    sector.style = {**(sector.style or {}), "color": colors.get(state.owner)}

        return missing
