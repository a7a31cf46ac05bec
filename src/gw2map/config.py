"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Base map options loaded from environment variables (GW2MAP_*)."""

    model_config = SettingsConfigDict(
        env_prefix="GW2MAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Language
    lang: str = "en"
    languages: list[str] = ["de", "en", "es", "fr", "zh"]

    # Zoom
    default_zoom: int = 4
    min_zoom: int = 0
    max_zoom: int = 6

    # API
    api_base: str = "https://api.guildwars2.com"
    http_timeout: Optional[float] = None  # None = httpx default

    # Static data tables written by the offline generators
    data_dir: Path = Path("./data")

    # Layers shown when the instance doesn't say otherwise
    init_layers: list[str] = ["map_label", "objective_icon", "sector_poly"]
    # Supplementary layers always merged in when extra layers are selected
    extra_markers: list[str] = ["adventure_icon", "jumpingpuzzle_icon", "masterypoint_icon"]

    # WvW
    matchup: Optional[str] = None
    match_refresh: float = 10.0  # seconds
    wvw_maps: list[int] = [38, 95, 96, 1099]
    # Spawn sectors keep their team colour, contested state never recolours them
    home_sectors: list[int] = [850, 993, 974, 1350, 836, 980, 1000, 1311, 845, 977, 997, 1343]
    # Maps whose objectives are skipped (e.g. borderlands not rendered on this floor)
    objective_excluded_maps: list[int] = []

    # Colours
    sector_poly_color: str = "rgba(255, 255, 255, 0.5)"
    sector_colors: dict[str, str] = {
        "green": "rgba(69, 200, 106, 0.5)",
        "blue": "rgba(69, 162, 247, 0.5)",
        "red": "rgba(222, 69, 69, 0.5)",
        "neutral": "rgba(222, 222, 222, 0.5)",
    }


settings = Settings()
