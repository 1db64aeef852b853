"""Binary reader with position tracking for decompressed save data."""

from __future__ import annotations

import struct

from civsave.errors import MalformedStream


class Reader:
    """Little-endian binary reader over bytes, bytearray or memoryview.

    The position can be moved freely, so the same reader can walk records
    at arbitrary offsets inside a large blob without copying it.
    """

    def __init__(self, data: bytes | bytearray | memoryview, position: int = 0) -> None:
        self._data = data
        self._position = 0
        self.position = position

    @property
    def position(self) -> int:
        """Current read position."""
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        if value < 0 or value > len(self._data):
            raise MalformedStream(f'Position {value} out of range [0, {len(self._data)}]')
        self._position = value

    @property
    def remaining(self) -> int:
        """Bytes remaining to read."""
        return len(self._data) - self._position

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        if count < 0 or self._position + count > len(self._data):
            raise MalformedStream(
                f'Cannot read {count} bytes at position {self._position}, only {self.remaining} remaining'
            )
        result = bytes(self._data[self._position : self._position + count])
        self._position += count
        return result

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(fmt, self.read_bytes(size))[0]

    def read_int8(self) -> int:
        return self._unpack('<b', 1)

    def read_uint8(self) -> int:
        return self._unpack('<B', 1)

    def read_int16(self) -> int:
        return self._unpack('<h', 2)

    def read_uint16(self) -> int:
        return self._unpack('<H', 2)

    def read_int32(self) -> int:
        return self._unpack('<i', 4)

    def read_uint32(self) -> int:
        return self._unpack('<I', 4)

    def peek_bytes(self, count: int) -> bytes:
        """Peek at bytes without advancing position."""
        if count < 0 or self._position + count > len(self._data):
            raise MalformedStream(f'Cannot peek {count} bytes at position {self._position}')
        return bytes(self._data[self._position : self._position + count])

    def peek_uint8(self, offset: int = 0) -> int:
        """Peek at an unsigned byte `offset` bytes ahead of the position."""
        pos = self._position + offset
        if offset < 0 or pos >= len(self._data):
            raise MalformedStream(f'Cannot peek byte at position {pos}')
        return self._data[pos]

    def skip(self, count: int) -> None:
        """Skip bytes."""
        if self._position + count > len(self._data):
            raise MalformedStream('Skip past end of data')
        self._position += count
