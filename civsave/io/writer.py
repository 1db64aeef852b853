"""Binary writer for save file serialization."""

from __future__ import annotations

import io
import struct


class Writer:
    """Little-endian binary writer backed by an in-memory buffer."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()

    @property
    def position(self) -> int:
        """Current write position."""
        return self._buffer.tell()

    @property
    def size(self) -> int:
        """Current size of written data."""
        current = self._buffer.tell()
        self._buffer.seek(0, 2)  # Seek to end
        size = self._buffer.tell()
        self._buffer.seek(current)  # Restore position
        return size

    def to_bytes(self) -> bytes:
        """Get all written data as bytes."""
        return self._buffer.getvalue()

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Write raw bytes."""
        self._buffer.write(data)

    def write_int8(self, value: int) -> None:
        self._buffer.write(struct.pack('<b', value))

    def write_uint8(self, value: int) -> None:
        self._buffer.write(struct.pack('<B', value))

    def write_int16(self, value: int) -> None:
        self._buffer.write(struct.pack('<h', value))

    def write_uint16(self, value: int) -> None:
        self._buffer.write(struct.pack('<H', value))

    def write_int32(self, value: int) -> None:
        self._buffer.write(struct.pack('<i', value))

    def write_uint32(self, value: int) -> None:
        self._buffer.write(struct.pack('<I', value))
