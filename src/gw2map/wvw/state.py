"""Live objective state decoded from a /v2/wvw/matches/:id snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from gw2map.wvw.guilds import GuildCache

FACTIONS = ("Green", "Blue", "Red")
NEUTRAL = "neutral"

# guild upgrade ids shown in the objective summary, in two groups
IMPROVEMENT_UPGRADES = (183, 365, 147, 307, 306, 418, 562, 329, 389, 168, 583)
TACTIC_UPGRADES = (590, 222, 483, 559, 298, 178, 399, 513, 383, 345)


class MatchObjective(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    type: str = ""
    owner: Optional[str] = None
    yaks_delivered: Optional[int] = None
    claimed_by: Optional[str] = None
    claimed_at: Optional[str] = None
    last_flipped: Optional[str] = None
    guild_upgrades: list[int] = []


class MatchMap(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    type: Optional[str] = None
    objectives: list[MatchObjective] = []


class MatchSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    maps: list[MatchMap] = []


def objective_tier(yaks_delivered: Optional[int]) -> int:
    """Upgrade tier from cumulative dolyak deliveries."""
    if not yaks_delivered:
        return 0
    if yaks_delivered >= 80:
        return 3
    if yaks_delivered >= 40:
        return 2
    if yaks_delivered >= 20:
        return 1
    return 0


def owner_color(owner: Optional[str]) -> str:
    if owner in FACTIONS:
        return owner.lower()
    return NEUTRAL


def format_timestamp(value: Optional[str]) -> Optional[str]:
    """ISO 8601 (API, UTC "Z") -> local date-time string."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class ObjectiveState:
    """Derived live state for one objective."""

    objective_id: str
    type: str
    owner: str
    tier: int
    yaks_delivered: int = 0
    claimed_by: Optional[str] = None
    claimed_at: Optional[str] = None
    last_flipped: Optional[str] = None
    guild_upgrades: list[int] = field(default_factory=list)

    @classmethod
    def from_snapshot(cls, objective: MatchObjective) -> "ObjectiveState":
        return cls(
            objective_id=objective.id,
            type=objective.type.lower(),
            owner=owner_color(objective.owner),
            tier=objective_tier(objective.yaks_delivered),
            yaks_delivered=objective.yaks_delivered or 0,
            claimed_by=objective.claimed_by,
            claimed_at=objective.claimed_at,
            last_flipped=objective.last_flipped,
            guild_upgrades=list(objective.guild_upgrades),
        )

    def style(self, fallback_type: str = "") -> dict:
        """Visual state descriptor for the objective icon."""
        obj_type = self.type or fallback_type
        return {
            "owner": self.owner,
            "tier": self.tier,
            "className": f"gw2map-icon gw2map-{obj_type}-icon {self.owner}",
        }

    def summary(
        self,
        name: str,
        guilds: GuildCache,
        upgrades: Mapping[int, Mapping],
        lang: str,
    ) -> dict:
        """Textual summary for the objective popup."""
        guild = guilds.get(self.claimed_by)
        supply = None
        if self.yaks_delivered:
            supply = str(self.yaks_delivered)
            if self.tier > 0:
                supply += f" (T{self.tier})"

        improvements = [
            _upgrade(u, upgrades, lang) for u in self.guild_upgrades if u in IMPROVEMENT_UPGRADES
        ]
        tactics = [
            _upgrade(u, upgrades, lang) for u in self.guild_upgrades if u in TACTIC_UPGRADES
        ]

        summary = {
            "name": name,
            "owner": self.owner,
            "tier": self.tier,
            "flipped": format_timestamp(self.last_flipped),
            "claimed": format_timestamp(self.claimed_at),
            "guild": guild.label() if guild else None,
            "supply": supply,
            "improvements": improvements,
            "tactics": tactics,
        }
        summary["lines"] = _summary_lines(summary)
        return summary


def _upgrade(upgrade_id: int, upgrades: Mapping[int, Mapping], lang: str) -> dict:
    entry = upgrades.get(upgrade_id) or {}
    names = entry.get("name") or {}
    if isinstance(names, Mapping):
        name = names.get(lang) or names.get("en")
    else:
        name = names
    return {
        "id": upgrade_id,
        "name": name or str(upgrade_id),
        "icon": entry.get("icon"),
    }


def _summary_lines(summary: dict) -> list[str]:
    lines = [summary["name"]]
    if summary["flipped"]:
        lines.append(f"flipped: {summary['flipped']}")
    if summary["claimed"]:
        lines.append(f"claimed: {summary['claimed']}")
    if summary["guild"]:
        lines.append(summary["guild"])
    if summary["supply"]:
        lines.append(f"supply: {summary['supply']}")
    if summary["improvements"]:
        lines.append("improvements: " + ", ".join(u["name"] for u in summary["improvements"]))
    if summary["tactics"]:
        lines.append("tactics: " + ", ".join(u["name"] for u in summary["tactics"]))
    return lines
