"""Per-instance map options parsed from untrusted string attributes.

A map instance is configured through flat string attributes (HTML data-*
attributes on the embedding page, query parameters, CLI flags). Every
attribute is optional and any malformed value silently degrades to the
field's default; nothing in here raises.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from loguru import logger

from gw2map.config import Settings, settings as default_settings

_TRUE_TOKENS = ("1", "true", "t", "yes", "y")

_LIST_PATTERN = re.compile(r"^([a-z_,\s]+)$", re.IGNORECASE)
_PAIR_PATTERN = re.compile(r"^([\[\]\s\d.,]+)$")
_MATCHUP_PATTERN = re.compile(r"^(\d+-\d+|none)$", re.IGNORECASE)
_LANGUAGE_PATTERN = re.compile(r"^([a-z]{2}|\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of one recognized attribute."""

    kind: str  # "int", "bool", "list", "pair" or "string"
    pattern: Optional[re.Pattern] = None
    aliases: tuple[str, ...] = ()


FIELDS: dict[str, FieldSpec] = {
    "language": FieldSpec("string", _LANGUAGE_PATTERN, ("lang",)),
    "zoom": FieldSpec("int"),
    "map_controls": FieldSpec("bool", aliases=("mapControls",)),
    "init_layers": FieldSpec("list", _LIST_PATTERN, ("initLayers",)),
    "extra_layers": FieldSpec("list", _LIST_PATTERN, ("extraLayers",)),
    "center_coords": FieldSpec("pair", _PAIR_PATTERN, ("centerCoords",)),
    "matchup": FieldSpec("string", _MATCHUP_PATTERN),
}


@dataclass(frozen=True)
class MapDataset:
    """Validated per-instance options."""

    language: str
    zoom: int
    map_controls: bool
    init_layers: tuple[str, ...]
    extra_layers: tuple[str, ...]
    center_coords: Optional[tuple[float, float]]
    matchup: Optional[str]


def _defaults(options: Settings) -> dict[str, Any]:
    return {
        "language": options.lang,
        "zoom": options.default_zoom,
        "map_controls": True,
        "init_layers": tuple(options.init_layers),
        "extra_layers": (),
        "center_coords": None,
        "matchup": options.matchup,
    }


# ---------------------------------------------------------------------------
# Generic parsers: each returns None when the value can't be used
# ---------------------------------------------------------------------------

def _parse_int(raw: str, spec: FieldSpec) -> Optional[int]:
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _parse_bool(raw: str, spec: FieldSpec) -> bool:
    return raw.strip().lower() in _TRUE_TOKENS


def _parse_list(raw: str, spec: FieldSpec) -> Optional[tuple[str, ...]]:
    if spec.pattern is not None and not spec.pattern.match(raw):
        return None
    values = tuple(v.strip().lower() for v in raw.split(",") if v.strip())
    return values or None


def _parse_pair(raw: str, spec: FieldSpec) -> Optional[tuple[float, float]]:
    if spec.pattern is not None and not spec.pattern.match(raw):
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, list) or len(data) < 2:
        return None
    x, y = data[0], data[1]
    # bool is an int subclass, reject it explicitly
    for v in (x, y):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
    return (x, y)


def _parse_string(raw: str, spec: FieldSpec) -> Optional[str]:
    value = raw.strip()
    if spec.pattern is not None and not spec.pattern.match(value):
        return None
    return value


_PARSERS = {
    "int": _parse_int,
    "bool": _parse_bool,
    "list": _parse_list,
    "pair": _parse_pair,
    "string": _parse_string,
}


# ---------------------------------------------------------------------------
# Field refinements
# ---------------------------------------------------------------------------

def _refine_language(value: str, options: Settings) -> str:
    languages = [lang.lower() for lang in options.languages]
    if value.isdigit():
        idx = int(value)
        return languages[idx] if idx < len(languages) else options.lang
    value = value.lower()
    return value if value in languages else options.lang


def _refine_zoom(value: int, options: Settings) -> int:
    if value < options.min_zoom or value > options.max_zoom:
        return options.default_zoom
    return value


def _refine_matchup(value: str, options: Settings) -> str:
    return value.lower()


_REFINERS = {
    "language": _refine_language,
    "zoom": _refine_zoom,
    "matchup": _refine_matchup,
}


def _raw_value(attributes: Mapping[str, Any], name: str, spec: FieldSpec) -> Optional[str]:
    for key in (name, *spec.aliases):
        value = attributes.get(key)
        if value is not None:
            return str(value)
    return None


def parse_dataset(
    attributes: Mapping[str, Any] | None,
    options: Settings | None = None,
) -> MapDataset:
    """Parse raw instance attributes into a MapDataset.

    Args:
        attributes: Flat attribute mapping; keys may be snake_case or the
            camelCase names used in data-* attributes.
        options: Base options providing defaults and bounds.

    Returns:
        A MapDataset with every field present and type-correct.
    """
    options = options or default_settings
    attributes = attributes or {}
    values = _defaults(options)

    for name, spec in FIELDS.items():
        raw = _raw_value(attributes, name, spec)
        if raw is None or not raw.strip():
            continue

        try:
            parsed = _PARSERS[spec.kind](raw, spec)
        except Exception as e:
            logger.debug(f"Dataset field {name}={raw!r} failed to parse: {e}")
            parsed = None

        if parsed is None:
            logger.debug(f"Dataset field {name}={raw!r} invalid, using default")
            continue

        refine = _REFINERS.get(name)
        if refine is not None:
            parsed = refine(parsed, options)

        values[name] = parsed

    return MapDataset(**values)
