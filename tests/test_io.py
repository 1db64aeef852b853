"""
Tests for the binary reader and writer.
"""

import pytest

from civsave.errors import MalformedStream
from civsave.io import Reader, Writer


def test_reader_little_endian() -> None:
    reader = Reader(b'\xff\x01\x02\xfe\xff\x78\x56\x34\x12')

    assert reader.read_int8() == -1
    assert reader.read_uint16() == 0x0201
    assert reader.read_int16() == -2
    assert reader.read_uint32() == 0x12345678
    assert reader.remaining == 0


def test_reader_start_position_and_peek() -> None:
    reader = Reader(bytearray(b'abcdef'), 2)

    assert reader.peek_bytes(2) == b'cd'
    assert reader.peek_uint8(3) == ord('f')
    assert reader.position == 2
    reader.skip(1)
    assert reader.read_bytes(2) == b'de'


def test_reader_bounds() -> None:
    reader = Reader(b'\x00\x01')

    with pytest.raises(MalformedStream):
        reader.read_uint32()
    with pytest.raises(MalformedStream):
        reader.peek_uint8(2)
    with pytest.raises(MalformedStream):
        reader.skip(3)
    with pytest.raises(MalformedStream):
        reader.position = 3
    assert reader.position == 0


def test_writer() -> None:
    writer = Writer()
    writer.write_uint8(1)
    writer.write_int8(-1)
    writer.write_uint16(0x0302)
    writer.write_int16(-2)
    writer.write_uint32(10)
    writer.write_int32(-1)
    writer.write_bytes(b'end')

    assert writer.to_bytes() == b'\x01\xff\x02\x03\xfe\xff\x0a\x00\x00\x00\xff\xff\xff\xffend'
    assert writer.size == writer.position == 17
