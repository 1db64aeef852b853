"""
Civilization VI save file compression/decompression.

The map, units and most of the game state live in one zlib stream embedded
in the save container:
- It starts at the first `78 9C` after the last `MOD_TITLE` string
- It ends at the last `00 00 FF FF` in the file (the stream is sync-flushed,
  never finished, so there is no final deflate block)
- The stream is written in 64 KiB chunks; every chunk after the first is
  preceded by its own uint32 length
"""

import zlib
from dataclasses import dataclass
from typing import Callable

from civsave.const import (
    CHUNK_LENGTH_SIZE,
    CHUNK_SIZE,
    MOD_TITLE_MARKER,
    SYNC_FLUSH_MARKER,
    ZLIB_START_MARKER,
)
from civsave.errors import MalformedStream, MarkerNotFound
from civsave.io.writer import Writer
from civsave.log import log


@dataclass(frozen=True)
class StreamSpan:
    """Location of the framed compressed stream inside a container.

    `end` points at the trailing sync-flush marker, which is not part of
    the span read by decompression but is replaced on recompression.
    """

    start: int
    end: int

    @property
    def replace_end(self) -> int:
        """End of the region overwritten when splicing a new stream in."""
        return self.end + len(SYNC_FLUSH_MARKER)


def find_anchor(data: bytes) -> int:
    """Offset of the last MOD_TITLE string; earlier ones belong to smaller streams."""
    index = data.rfind(MOD_TITLE_MARKER)
    if index == -1:
        raise MarkerNotFound('MOD_TITLE', MOD_TITLE_MARKER)
    return index


def find_stream_start(data: bytes, anchor: int) -> int:
    """Offset of the first zlib header at or after `anchor`."""
    index = data.find(ZLIB_START_MARKER, anchor)
    if index == -1:
        raise MarkerNotFound('zlib start', ZLIB_START_MARKER, anchor)
    return index


def find_stream_end(data: bytes) -> int:
    """Offset of the last sync-flush marker in the whole file."""
    # Not scoped to the span after the anchor: a later stream's marker wins.
    index = data.rfind(SYNC_FLUSH_MARKER)
    if index == -1:
        raise MarkerNotFound('sync flush', SYNC_FLUSH_MARKER)
    return index


def locate_stream(data: bytes) -> StreamSpan:
    """Resolve both boundaries of the embedded stream."""
    start = find_stream_start(data, find_anchor(data))
    end = find_stream_end(data)
    if end <= start:
        raise MalformedStream(f'Empty compressed span: start={start:#x}, end={end:#x}')
    span = StreamSpan(start=start, end=end)
    log.debug(f'Compressed span: {span.start:#x}..{span.end:#x} ({span.end - span.start} bytes)')
    return span


def strip_chunk_framing(framed: bytes) -> bytes:
    """Drop the length field that follows every full chunk."""
    output = bytearray()
    pos = 0
    while pos < len(framed):
        output += framed[pos : pos + CHUNK_SIZE]
        pos += CHUNK_SIZE + CHUNK_LENGTH_SIZE
    return bytes(output)


def frame_chunks(stream: bytes) -> bytes:
    """Split a compressed stream into 64 KiB chunks with length prefixes.

    The first chunk carries no prefix. Every later chunk is preceded by its
    own byte length as a little-endian uint32.
    """
    writer = Writer()
    chunk_count = 0
    for pos in range(0, len(stream), CHUNK_SIZE):
        chunk = stream[pos : pos + CHUNK_SIZE]
        if pos:
            writer.write_uint32(len(chunk))
        writer.write_bytes(chunk)
        chunk_count += 1
    log.debug(f'Framed {len(stream)} compressed bytes into {chunk_count} chunks')
    return writer.to_bytes()


def inflate_sync(compressed: bytes) -> bytes:
    """Inflate a zlib stream that was sync-flushed but never finished."""
    if not compressed:
        raise MalformedStream('No compressed data to inflate')
    # A decompressobj returns everything decoded so far without demanding
    # the final block that zlib.decompress() would require.
    decompressor = zlib.decompressobj()
    try:
        output = decompressor.decompress(compressed)
    except zlib.error as e:
        raise MalformedStream(f'Inflate failed: {e}') from e
    if not output:
        raise MalformedStream('Compressed stream inflated to nothing')
    return output


def deflate_sync(data: bytes, level: int = zlib.Z_DEFAULT_COMPRESSION) -> bytes:
    """Deflate `data` into a zlib stream terminated by a sync flush.

    The trailing sync marker must not be split by a chunk length prefix, or
    the stream end can no longer be found. When the last chunk would hold
    fewer than 4 bytes, an extra empty stored block (`00 00 00 FF FF`) moves
    the marker past the chunk boundary. A full flush is used for it because
    zlib ignores a second consecutive sync flush.
    """
    compressor = zlib.compressobj(level)
    try:
        stream = compressor.compress(data) + compressor.flush(zlib.Z_SYNC_FLUSH)
        if len(stream) > CHUNK_SIZE and 0 < len(stream) % CHUNK_SIZE < len(SYNC_FLUSH_MARKER):
            stream += compressor.flush(zlib.Z_FULL_FLUSH)
    except zlib.error as e:
        raise MalformedStream(f'Deflate failed: {e}') from e
    return stream


def decompress_save(data: bytes) -> bytes:
    """Extract and inflate the main compressed stream of a save file."""
    span = locate_stream(data)
    compressed = strip_chunk_framing(data[span.start : span.end])
    decompressed = inflate_sync(compressed)
    log.debug(f'Decompressed {len(decompressed)} bytes from {len(compressed)} bytes')
    return decompressed


def compress_save(data: bytes, blob: bytes, level: int = zlib.Z_DEFAULT_COMPRESSION) -> bytes:
    """
    Build a new save file from an existing one and a decompressed blob.

    Args:
        data: Original save file bytes, kept as-is outside the compressed span
        blob: Decompressed data to store; its length may differ from the original
        level: zlib compression level

    Returns:
        New save file bytes
    """
    span = locate_stream(data)
    framed = frame_chunks(deflate_sync(blob, level))
    log.debug(f'Compressed {len(blob)} bytes to {len(framed)} framed bytes')
    return b''.join((data[: span.start], framed, data[span.replace_end :]))


def modify_save(data: bytes, transform: Callable[[bytes], bytes] = lambda blob: blob) -> bytes:
    """Decompress, run `transform` on the blob and recompress into a new save."""
    return compress_save(data, transform(decompress_save(data)))
