"""
Pytest configuration and shared fixtures.

Real saves are large and not redistributable, so most tests run against
synthetic containers: a fake outer file with decoy markers wrapped around
a genuine chunk-framed, sync-flushed zlib stream.
"""

import struct
from pathlib import Path
from typing import Callable

import pytest

from civsave.compression import deflate_sync, frame_chunks
from civsave.const import SYNC_FLUSH_MARKER, TILE_TABLE_MARKER


FIXTURES_DIR = Path(__file__).parent / 'fixtures'

# Outer file bytes before and after the compressed stream. The header has
# an earlier MOD_TITLE, zlib header and sync marker that must all be ignored.
CONTAINER_HEAD = (
    b'CIV6\x01\x00\x00\x00'
    + b'MOD_TITLE\x00'
    + b'\x78\x9c\x03\x00'
    + SYNC_FLUSH_MARKER
    + b'GAME_SPEED\x00MOD_TITLE\x00\x10\x00\x00\x00'
)
CONTAINER_TAIL = b'\x01\x00\x00\x00END_OF_SAVE'

BLOB_HEAD = b'\x2a\x00\x00\x00' * 8 + b'game state before the map'
BLOB_TAIL = b'game state after the map' + b'\x07\x00\x00\x00' * 4


def build_tile(
    index: int = 0,
    flags2: int = 0,
    flags4: int = 0,
    buffer_b: bool = False,
) -> bytes:
    """Build one tile record; header bytes carry the index so records differ."""
    header = bytearray((index + i) & 0x3F for i in range(55))
    header[49] = flags2
    header[51] = flags4
    record = bytes(header)

    if flags4 & 0x01:
        buffer_a = bytearray(0xA0 | (i & 0x0F) for i in range(24))
        buffer_a[20] = 0x01 if buffer_b else 0x00
        record += bytes(buffer_a)
        if buffer_b:
            record += bytes([0xB0 | (index & 0x0F)]) * 20
    if flags4 & 0x02:
        record += bytes([0xC0 | (index & 0x0F)]) * 44
    if flags2 & 0x40:
        record += bytes([0xD0 | (index & 0x0F)]) * 17
    return record


def tile_pattern(index: int) -> dict:
    """Cycle through every sub-buffer combination."""
    return [
        {},
        {'flags4': 0x01},
        {'flags4': 0x01, 'buffer_b': True},
        {'flags4': 0x02, 'flags2': 0x40},
        {'flags4': 0x03, 'flags2': 0x40, 'buffer_b': True},
        {'flags2': 0x41},
        {'flags4': 0x05, 'flags2': 0x3F},
    ][index % 7]


def build_blob(tiles: list[bytes], count: int | None = None) -> bytes:
    """Wrap tile records in a decompressed blob with a table marker and count."""
    count = len(tiles) if count is None else count
    return BLOB_HEAD + TILE_TABLE_MARKER + struct.pack('<I', count) + b''.join(tiles) + BLOB_TAIL


def build_container(blob: bytes) -> bytes:
    """Wrap a decompressed blob into a minimal save container."""
    return CONTAINER_HEAD + frame_chunks(deflate_sync(blob)) + CONTAINER_TAIL


@pytest.fixture()
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture()
def container_head() -> bytes:
    return CONTAINER_HEAD


@pytest.fixture()
def container_tail() -> bytes:
    return CONTAINER_TAIL


@pytest.fixture()
def make_tile() -> Callable[..., bytes]:
    return build_tile


@pytest.fixture()
def make_blob() -> Callable[..., bytes]:
    return build_blob


@pytest.fixture()
def make_container() -> Callable[[bytes], bytes]:
    return build_container


@pytest.fixture()
def duel_tiles() -> list[bytes]:
    """Records of a 44x26 map covering every sub-buffer combination."""
    return [build_tile(i, **tile_pattern(i)) for i in range(1144)]


@pytest.fixture()
def duel_blob(duel_tiles: list[bytes]) -> bytes:
    return build_blob(duel_tiles)


@pytest.fixture()
def duel_save(duel_blob: bytes) -> bytes:
    return build_container(duel_blob)


@pytest.fixture()
def real_save(fixtures_dir: Path) -> bytes:
    """Load a real save file fixture, if one has been dropped in."""
    save_path = fixtures_dir / 'map.Civ6Save'
    if not save_path.exists():
        pytest.skip('map.Civ6Save fixture not found')
    return save_path.read_bytes()
