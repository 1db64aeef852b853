"""
Map tile table access for decompressed Civilization VI save data.

The table is found by a fixed 12-byte marker; a uint32 tile count follows
it and the records start right after the count. Records are variable
length (see civsave.model.tile) and stored row by row from the top-left.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from civsave.compression import decompress_save
from civsave.const import TILE_COUNT_OFFSET, TILE_TABLE_BODY_OFFSET, TILE_TABLE_MARKER
from civsave.errors import MalformedStream, MarkerNotFound, RecordLengthMismatch
from civsave.io.reader import Reader
from civsave.log import log
from civsave.model.map_size import MapSize, map_size_for
from civsave.model.tile import TileRecord, record_length


def locate_table(blob: bytes | bytearray) -> tuple[int, int]:
    """Find the tile table.

    Returns:
        (marker offset, tile count)
    """
    offset = blob.find(TILE_TABLE_MARKER)
    if offset == -1:
        raise MarkerNotFound('tile table', TILE_TABLE_MARKER)

    count = Reader(blob, offset + TILE_COUNT_OFFSET).read_uint32()
    log.debug(f'Tile table at {offset:#x} with {count} tiles')
    return offset, count


def _walk_records(blob: bytes | bytearray, start: int, count: int) -> Iterator[tuple[int, int, int]]:
    """Yield (index, offset, length) for each record."""
    offset = start
    for index in range(count):
        length = record_length(blob, offset)
        yield index, offset, length
        offset += length


def decode_tiles(blob: bytes | bytearray) -> Iterator[TileRecord]:
    """Decode every tile record in table order.

    The table marker and the map size are checked immediately; the records
    themselves are decoded lazily as the iterator is consumed.
    """
    start, count, _map_size = _table_layout(blob)
    return _decode_records(blob, start, count)


def _table_layout(blob: bytes | bytearray) -> tuple[int, int, MapSize]:
    """(first record offset, tile count, map size) of a table with a known size."""
    offset, count = locate_table(blob)
    map_size = map_size_for(count)
    log.debug(f'Map size {map_size.name} ({map_size.width}x{map_size.height})')
    return offset + TILE_TABLE_BODY_OFFSET, count, map_size


def _decode_records(blob: bytes | bytearray, start: int, count: int) -> Iterator[TileRecord]:
    reader = Reader(blob, start)
    for index in range(count):
        yield TileRecord.read(reader, index=index)


def encode_tiles(blob: bytes | bytearray, mutator: Callable[[bytes], bytes]) -> bytearray:
    """
    Rewrite every tile record in place.

    `mutator` receives each record's bytes and must return a run of the
    same length. Record boundaries come from the flags as they were before
    mutation, so a mutator must not toggle sub-buffer flags.

    Args:
        blob: Decompressed save data; a bytearray is modified in place
        mutator: Per-record transform

    Returns:
        The modified blob
    """
    data = blob if isinstance(blob, bytearray) else bytearray(blob)
    offset, count = locate_table(data)

    changed = 0
    for index, record_offset, length in _walk_records(data, offset + TILE_TABLE_BODY_OFFSET, count):
        if record_offset + length > len(data):
            raise MalformedStream(
                f'Tile {index} at {record_offset:#x} needs {length} bytes, only {len(data) - record_offset} left'
            )
        original = bytes(data[record_offset : record_offset + length])
        replacement = mutator(original)
        if len(replacement) != length:
            raise RecordLengthMismatch(record_offset, length, len(replacement))
        if replacement != original:
            data[record_offset : record_offset + length] = replacement
            changed += 1

    log.debug(f'Rewrote {changed} of {count} tiles')
    return data


def to_structured(blob: bytes | bytearray) -> list[dict[str, Any]]:
    """Flatten the tile table into one dict per tile, for reporting and export."""
    start, count, map_size = _table_layout(blob)

    rows = []
    for record in _decode_records(blob, start, count):
        x, y = map_size.coordinates(record.index)
        row: dict[str, Any] = {
            'x': x,
            'y': y,
            'hex_location': record.offset,
            'tile_length': record.length,
        }
        row.update(record.header.to_dict())
        for name, buffer in zip(('buffer_a', 'buffer_b', 'buffer_c', 'buffer_d'), record.buffers):
            row[name] = buffer.hex() if buffer is not None else ''
        rows.append(row)
    return rows


def decode_to_structured(data: bytes) -> list[dict[str, Any]]:
    """Decompress a save file and flatten its tile table."""
    return to_structured(decompress_save(data))
