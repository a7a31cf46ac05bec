"""World data -> map layer transformation."""

from gw2map.world.overrides import Overrides
from gw2map.world.rect import ContinentRect
from gw2map.world.tables import StaticTables, load_tables
from gw2map.world.transformer import InvalidResponseShape, WorldTreeTransformer, localize

__all__ = [
    "ContinentRect",
    "InvalidResponseShape",
    "Overrides",
    "StaticTables",
    "WorldTreeTransformer",
    "load_tables",
    "localize",
]
