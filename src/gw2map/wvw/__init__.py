"""Live WvW match state for objective and sector features."""

from gw2map.wvw.executor import PeriodicExecutor
from gw2map.wvw.guilds import GuildCache, GuildInfo
from gw2map.wvw.matches import MatchWorld, assign_match_worlds
from gw2map.wvw.state import ObjectiveState, objective_tier, owner_color
from gw2map.wvw.updater import LiveObjectiveUpdater

__all__ = [
    "GuildCache",
    "GuildInfo",
    "LiveObjectiveUpdater",
    "MatchWorld",
    "ObjectiveState",
    "PeriodicExecutor",
    "assign_match_worlds",
    "objective_tier",
    "owner_color",
]
