"""ContinentRect -- a map's extent in continent space.

The API describes every map with two rectangles: `continent_rect`, the
area the map covers in continent pixel space, and `map_rect`, the same
area in the map's own coordinate space. Both are exported so the
renderer can align tiles and convert map-space positions.
"""

from __future__ import annotations

Point = tuple[float, float]
Rect = tuple[Point, Point]


def _as_rect(raw) -> Rect:
    (x0, y0), (x1, y1) = raw
    return (float(x0), float(y0)), (float(x1), float(y1))


class ContinentRect:
    """Continent rectangle with an optional map-space rectangle."""

    def __init__(self, continent_rect, map_rect=None) -> None:
        self.continent_rect: Rect = _as_rect(continent_rect)
        self.map_rect: Rect | None = _as_rect(map_rect) if map_rect is not None else None

    def center(self) -> list[float]:
        """Geometric centre of the continent rectangle as [x, y]."""
        (x0, y0), (x1, y1) = self.continent_rect
        return [(x0 + x1) / 2, (y0 + y1) / 2]

    def bounds(self) -> list[list[float]]:
        """[[west, north], [east, south]] in continent space."""
        (x0, y0), (x1, y1) = self.continent_rect
        return [[min(x0, x1), min(y0, y1)], [max(x0, x1), max(y0, y1)]]

    def to_dict(self) -> dict:
        return {
            "continent_rect": [list(p) for p in self.continent_rect],
            "map_rect": [list(p) for p in self.map_rect] if self.map_rect else None,
            "bounds": self.bounds(),
            "center": self.center(),
        }

    def __repr__(self) -> str:
        return f"ContinentRect({self.continent_rect!r}, {self.map_rect!r})"
