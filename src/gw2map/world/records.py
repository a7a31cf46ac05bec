"""Pydantic models for the world-data responses and static tables.

Each source category is decoded once at ingestion into its own record
type so the transformer works on a fixed field set per category instead
of probing loose dicts. Unknown keys are ignored: the API adds fields
(tasks, adventures, mastery points, ...) that no layer uses.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

# a plain name or a language-keyed mapping {"en": ..., "de": ...}
LocalizedName = Union[str, dict[str, str], None]
Coord = list[float]


class Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


def _keyed(value: Any) -> Any:
    """Accept a list of records as well as the API's id-keyed mapping."""
    if isinstance(value, list):
        return {str(item.get("id", idx)) if isinstance(item, dict) else str(idx): item
                for idx, item in enumerate(value)}
    return value


class SectorRecord(Record):
    id: int
    name: LocalizedName = None
    level: Optional[int] = None
    chat_link: Optional[str] = None
    coord: Coord
    bounds: list[Coord] = []


class PoiRecord(Record):
    id: Union[int, str, None] = None
    type: str
    name: LocalizedName = None
    icon: Optional[str] = None
    chat_link: Optional[str] = None
    coord: Coord


class HeroPointRecord(Record):
    id: Union[str, int]
    coord: Coord


class MapRecord(Record):
    id: Optional[int] = None
    name: LocalizedName = None
    min_level: Optional[int] = None
    max_level: Optional[int] = None
    continent_rect: list[Coord]
    map_rect: Optional[list[Coord]] = None
    label_coord: Optional[Coord] = None
    sectors: dict[str, SectorRecord] = {}
    points_of_interest: dict[str, PoiRecord] = {}
    skill_challenges: list[HeroPointRecord] = []

    @field_validator("sectors", "points_of_interest", mode="before")
    @classmethod
    def key_records(cls, v: Any) -> Any:
        return _keyed(v)


class RegionRecord(Record):
    id: Optional[int] = None
    name: LocalizedName = None
    label_coord: Optional[Coord] = None
    maps: dict[str, MapRecord] = {}


class ObjectiveRecord(Record):
    """A WvW objective from the pre-baked objectives table."""

    id: str
    type: str
    name: LocalizedName = None
    sector_id: Optional[int] = None
    chat_link: Optional[str] = None
    coord: Optional[Coord] = None
    label_coord: Optional[Coord] = None

    @field_validator("type")
    @classmethod
    def lower_type(cls, v: str) -> str:
        return v.lower()


class ExtraOptions(Record):
    """Fields an extra-layer entry may set or inherit from its layer."""

    type: Optional[str] = None
    layertype: Optional[str] = None
    icon: Optional[str] = None
    className: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    name: LocalizedName = None
    featureType: Optional[str] = None
    antPath: Optional[bool] = None
    antColor: Optional[str] = None
    antOpacity: Optional[float] = None
    antDashArray: Optional[str] = None


class ExtraEntry(ExtraOptions):
    id: Union[str, int, None] = None
    # a point, or nested rings/lines for non-point geometries
    coord: list[Any]


class ExtraLayer(ExtraOptions):
    data: dict[int, list[ExtraEntry]] = {}
