"""Save file model classes."""

from civsave.model.map_size import MAP_SIZES, MapSize, map_size_for
from civsave.model.tile import TileHeader, TileRecord, record_length

__all__ = ['MAP_SIZES', 'MapSize', 'TileHeader', 'TileRecord', 'map_size_for', 'record_length']
