"""Tile record structures of the map table.

A tile record is a fixed 55-byte header followed by up to four optional
sub-buffers. Which ones are present is driven by flag bytes:

- flags4 bit 0: buffer A (24 bytes); byte 20 of buffer A, bit 0: buffer B (20 bytes)
- flags4 bit 1: buffer C (44 bytes)
- flags2 bit 6: buffer D (17 bytes)

They are stored in that order: A, B, C, D.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from civsave.const import (
    BUFFER_A_FLAG_BUFFER_B,
    BUFFER_A_FLAG_OFFSET,
    BUFFER_A_SIZE,
    BUFFER_B_SIZE,
    BUFFER_C_SIZE,
    BUFFER_D_SIZE,
    FLAGS2_BUFFER_D,
    FLAGS2_OFFSET,
    FLAGS4_BUFFER_A,
    FLAGS4_BUFFER_C,
    FLAGS4_OFFSET,
    TILE_HEADER_SIZE,
)
from civsave.errors import MalformedStream, RecordLengthMismatch
from civsave.io.reader import Reader
from civsave.io.writer import Writer


# Field name -> primitive type, in on-disk order. Offsets are noted for reference.
_HEADER_LAYOUT: tuple[tuple[str, str], ...] = (
    ('int16_1', 'uint16'),  # 0
    ('int16_2', 'uint16'),  # 2
    ('int16_3', 'uint16'),  # 4
    ('int16_4', 'uint16'),  # 6
    ('landmass', 'uint32'),  # 8
    ('terrain', 'uint32'),  # 12, e.g. snow, tundra, hills, mountains
    ('feature', 'uint32'),  # 16, e.g. forest
    ('natural_wonder', 'int16'),  # 20
    ('continent', 'uint32'),  # 22
    ('number_of_units', 'int8'),  # 26
    ('resource_type', 'uint32'),  # 27
    ('resource_boolean', 'int16'),  # 31
    ('improvement', 'uint32'),  # 33
    ('improvement_player', 'uint8'),  # 37
    ('road_level', 'uint8'),  # 38, 1: classical, 2: industrial, 3: modern
    ('road_level_2', 'uint8'),  # 39
    ('appeal', 'int16'),  # 40
    ('river_e', 'uint8'),  # 42
    ('river_se', 'uint8'),  # 43
    ('river_sw', 'uint8'),  # 44
    ('river_count', 'uint8'),  # 45
    ('river_map', 'uint8'),  # 46, 6 bits: NW, W, SW, SE, E, NE
    ('cliff_map', 'int8'),  # 47, 6 bits: NW, W, SW, SE, E, NE
    ('flags1', 'uint8'),  # 48
    ('flags2', 'uint8'),  # 49
    ('flags3', 'uint8'),  # 50
    ('flags4', 'uint8'),  # 51
    ('flags5', 'uint8'),  # 52
    ('flags6', 'uint8'),  # 53
    ('flags7', 'uint8'),  # 54
)


@dataclass
class TileHeader:
    """Fixed 55-byte tile header.

    Most fields are only partially understood; unknown ones keep their
    positional names so every byte survives a read/write cycle.
    """

    int16_1: int
    int16_2: int
    int16_3: int
    int16_4: int
    landmass: int
    terrain: int
    feature: int
    natural_wonder: int
    continent: int
    number_of_units: int
    resource_type: int
    resource_boolean: int
    improvement: int
    improvement_player: int
    road_level: int
    road_level_2: int
    appeal: int
    river_e: int
    river_se: int
    river_sw: int
    river_count: int
    river_map: int
    cliff_map: int
    flags1: int
    flags2: int
    flags3: int
    flags4: int
    flags5: int
    flags6: int
    flags7: int

    SIZE = TILE_HEADER_SIZE

    @classmethod
    def read(cls, reader: Reader) -> TileHeader:
        """Read TileHeader from reader."""
        values = {name: getattr(reader, f'read_{kind}')() for name, kind in _HEADER_LAYOUT}
        return cls(**values)

    def write(self, writer: Writer) -> None:
        """Write TileHeader to writer."""
        for name, kind in _HEADER_LAYOUT:
            getattr(writer, f'write_{kind}')(getattr(self, name))

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def record_length(data: bytes | bytearray | memoryview, offset: int = 0) -> int:
    """Total byte length of the record at `offset`, derived from its flag bytes."""
    reader = Reader(data, offset)
    flags2 = reader.peek_uint8(FLAGS2_OFFSET)
    flags4 = reader.peek_uint8(FLAGS4_OFFSET)

    length = TILE_HEADER_SIZE
    if flags4 & FLAGS4_BUFFER_A:
        length += BUFFER_A_SIZE
        if reader.peek_uint8(TILE_HEADER_SIZE + BUFFER_A_FLAG_OFFSET) & BUFFER_A_FLAG_BUFFER_B:
            length += BUFFER_B_SIZE
    if flags4 & FLAGS4_BUFFER_C:
        length += BUFFER_C_SIZE
    if flags2 & FLAGS2_BUFFER_D:
        length += BUFFER_D_SIZE
    return length


@dataclass
class TileRecord:
    """One map tile: header plus the sub-buffers its flags declare."""

    header: TileHeader
    buffer_a: bytes | None = None
    buffer_b: bytes | None = None
    buffer_c: bytes | None = None
    buffer_d: bytes | None = None

    # Position in the table and in the decompressed blob
    index: int = 0
    offset: int = 0

    @classmethod
    def read(cls, reader: Reader, index: int = 0) -> TileRecord:
        """Read a full record at the reader's position."""
        offset = reader.position
        header = TileHeader.read(reader)

        buffer_a = buffer_b = buffer_c = buffer_d = None
        if header.flags4 & FLAGS4_BUFFER_A:
            buffer_a = reader.read_bytes(BUFFER_A_SIZE)
            if buffer_a[BUFFER_A_FLAG_OFFSET] & BUFFER_A_FLAG_BUFFER_B:
                buffer_b = reader.read_bytes(BUFFER_B_SIZE)
        if header.flags4 & FLAGS4_BUFFER_C:
            buffer_c = reader.read_bytes(BUFFER_C_SIZE)
        if header.flags2 & FLAGS2_BUFFER_D:
            buffer_d = reader.read_bytes(BUFFER_D_SIZE)

        return cls(
            header=header,
            buffer_a=buffer_a,
            buffer_b=buffer_b,
            buffer_c=buffer_c,
            buffer_d=buffer_d,
            index=index,
            offset=offset,
        )

    @classmethod
    def from_bytes(cls, raw: bytes, index: int = 0, offset: int = 0) -> TileRecord:
        """Parse a standalone record; `raw` must be exactly one record long."""
        if len(raw) < TILE_HEADER_SIZE:
            raise RecordLengthMismatch(offset, TILE_HEADER_SIZE, len(raw))
        try:
            expected = record_length(raw)
        except MalformedStream:
            # buffer A is declared but its flag byte lies past the end
            raise RecordLengthMismatch(offset, TILE_HEADER_SIZE + BUFFER_A_SIZE, len(raw)) from None
        if expected != len(raw):
            raise RecordLengthMismatch(offset, expected, len(raw))

        record = cls.read(Reader(raw), index=index)
        record.offset = offset
        return record

    def write(self, writer: Writer) -> None:
        self.header.write(writer)
        for buffer in self.buffers:
            if buffer is not None:
                writer.write_bytes(buffer)

    def to_bytes(self) -> bytes:
        writer = Writer()
        self.write(writer)
        return writer.to_bytes()

    @property
    def buffers(self) -> tuple[bytes | None, ...]:
        """Sub-buffers in storage order."""
        return self.buffer_a, self.buffer_b, self.buffer_c, self.buffer_d

    @property
    def length(self) -> int:
        return TILE_HEADER_SIZE + sum(len(b) for b in self.buffers if b is not None)
