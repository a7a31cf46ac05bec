"""Assign worlds to their current match from /v2/wvw/matches/overview."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from gw2map.world.transformer import localize

TEAM_COLORS = ("green", "blue", "red")


@dataclass
class MatchWorld:
    world_id: int
    match: str
    color: str
    name: str = ""


def matches_by_id(overview: Iterable[Mapping]) -> dict[str, Mapping]:
    return {match["id"]: match for match in overview if "id" in match}


def assign_match_worlds(
    overview: Iterable[Mapping],
    worlds: Optional[Mapping] = None,
    lang: str = "en",
) -> dict[int, MatchWorld]:
    """Map every world in the overview to its match id and team colour.

    Args:
        overview: The matches overview response (list of matches).
        worlds: Optional world table {world_id: {"name": {lang: name}}}.
        lang: Language for world names.

    Returns:
        world id -> MatchWorld, in overview order.
    """
    worlds = worlds or {}
    assigned: dict[int, MatchWorld] = {}
    for match in overview:
        all_worlds = match.get("all_worlds") or {}
        for color in TEAM_COLORS:
            for world_id in all_worlds.get(color, []):
                info = worlds.get(world_id) or worlds.get(str(world_id)) or {}
                assigned[world_id] = MatchWorld(
                    world_id=world_id,
                    match=match["id"],
                    color=color,
                    name=localize(info.get("name"), lang) or str(world_id),
                )
    return assigned


def world_choices(match_worlds: Mapping[int, MatchWorld]) -> list[MatchWorld]:
    """Worlds sorted by name, for a world/match selector."""
    return sorted(match_worlds.values(), key=lambda w: w.name.lower())
