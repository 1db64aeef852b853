"""Known map sizes, keyed by total tile count."""

from __future__ import annotations

from dataclasses import dataclass

from civsave.errors import UnsupportedMapSize


@dataclass(frozen=True)
class MapSize:
    name: str
    width: int
    height: int

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    def coordinates(self, index: int) -> tuple[int, int]:
        """(x, y) of a tile index; tiles are stored row by row."""
        return index % self.width, index // self.width


MAP_SIZES: dict[int, MapSize] = {
    size.tile_count: size
    for size in (
        MapSize('Duel', 44, 26),
        MapSize('Tiny', 60, 38),
        MapSize('Small', 74, 46),
        MapSize('Standard', 84, 54),
        MapSize('Large', 96, 60),
        MapSize('Huge', 106, 66),
    )
}


def map_size_for(tile_count: int) -> MapSize:
    """Look up the map geometry for a tile count."""
    try:
        return MAP_SIZES[tile_count]
    except KeyError:
        raise UnsupportedMapSize(tile_count) from None
