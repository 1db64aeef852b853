"""SaveFile - top-level entry point for save file operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from civsave.compression import compress_save, decompress_save
from civsave.model.tile import TileRecord
from civsave.tiles import decode_tiles, encode_tiles, to_structured


@dataclass
class SaveFile:
    """A .Civ6Save container and its decompressed game data.

    The container bytes are never modified; every edit produces a new
    SaveFile, so a failed edit leaves the original untouched.
    """

    data: bytes
    _decompressed: bytes | None = field(default=None, repr=False)

    @classmethod
    def load(cls, path: Path) -> SaveFile:
        """Load a save file from disk."""
        return cls.from_bytes(path.read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> SaveFile:
        return cls(data=bytes(data))

    def decompressed(self) -> bytes:
        """Decompressed game data, inflated on first use."""
        if self._decompressed is None:
            self._decompressed = decompress_save(self.data)
        return self._decompressed

    def tiles(self) -> Iterator[TileRecord]:
        """Decode the map tiles in table order."""
        return decode_tiles(self.decompressed())

    def to_structured(self) -> list[dict[str, Any]]:
        """One dict per tile, with grid coordinates and hex sub-buffers."""
        return to_structured(self.decompressed())

    def modify(self, transform: Callable[[bytes], bytes] = lambda blob: blob) -> SaveFile:
        """Apply `transform` to the decompressed data and recompress.

        Args:
            transform: Function from decompressed data to new decompressed data

        Returns:
            New SaveFile holding the rebuilt container
        """
        blob = bytes(transform(self.decompressed()))
        return SaveFile(data=compress_save(self.data, blob), _decompressed=blob)

    def modify_tiles(self, mutator: Callable[[bytes], bytes]) -> SaveFile:
        """Rewrite every tile record with `mutator`; records keep their length."""
        return self.modify(lambda blob: encode_tiles(blob, mutator))

    def to_bytes(self) -> bytes:
        return self.data

    def save(self, path: Path) -> None:
        """Write the container to disk.

        Args:
            path: Output file path
        """
        path.write_bytes(self.data)
