"""Errors raised while locating, inflating and walking save file data."""


class FormatError(ValueError):
    """Base class for every save file format failure."""


class MarkerNotFound(FormatError):
    """A required byte marker is absent."""

    def __init__(self, name: str, marker: bytes, start: int = 0) -> None:
        self.name = name
        self.marker = marker
        self.start = start
        super().__init__(f'{name} marker {marker.hex(" ")} not found (searched from offset {start})')


class UnsupportedMapSize(FormatError):
    """Tile count is not one of the known map sizes."""

    def __init__(self, tile_count: int) -> None:
        self.tile_count = tile_count
        super().__init__(f'Unsupported map size: {tile_count} tiles')


class MalformedStream(FormatError):
    """Compressed stream or record table cannot be decoded."""


class RecordLengthMismatch(FormatError):
    """A tile record byte run does not have the expected length."""

    def __init__(self, offset: int, expected: int, actual: int) -> None:
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(f'Tile record at offset {offset:#x}: expected {expected} bytes, got {actual}')
