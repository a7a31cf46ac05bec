"""Claiming-guild lookup cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GuildInfo:
    name: str
    tag: str

    def label(self) -> str:
        return f"{self.name} [{self.tag}]"


class GuildCache:
    """Guild id -> GuildInfo. Entries are added once and never replaced.

    Only guilds that claimed an objective end up here, so the cache stays
    small for the lifetime of the process and has no eviction.
    """

    def __init__(self) -> None:
        self._guilds: dict[str, GuildInfo] = {}

    def add(self, guild_id: str, info: GuildInfo) -> GuildInfo:
        """Store info for guild_id unless it is already cached."""
        return self._guilds.setdefault(guild_id, info)

    def get(self, guild_id: Optional[str]) -> Optional[GuildInfo]:
        if guild_id is None:
            return None
        return self._guilds.get(guild_id)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._guilds

    def __len__(self) -> int:
        return len(self._guilds)
