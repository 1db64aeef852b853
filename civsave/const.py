"""
Constants for the Civilization VI save file editor.
"""

# Outer container markers
MOD_TITLE_MARKER = b'MOD_TITLE'
ZLIB_START_MARKER = b'\x78\x9c'
SYNC_FLUSH_MARKER = b'\x00\x00\xff\xff'

# Chunk framing of the embedded stream
CHUNK_SIZE = 64 * 1024
CHUNK_LENGTH_SIZE = 4

# Tile table: three uint32 words (14, 15, 6) followed by a uint32 tile count
TILE_TABLE_MARKER = b'\x0e\x00\x00\x00\x0f\x00\x00\x00\x06\x00\x00\x00'
TILE_COUNT_OFFSET = 12
TILE_TABLE_BODY_OFFSET = 16

# Tile record layout
TILE_HEADER_SIZE = 55
FLAGS2_OFFSET = 49
FLAGS4_OFFSET = 51
BUFFER_A_SIZE = 24
BUFFER_A_FLAG_OFFSET = 20
BUFFER_B_SIZE = 20
BUFFER_C_SIZE = 44
BUFFER_D_SIZE = 17

FLAGS4_BUFFER_A = 0x01
FLAGS4_BUFFER_C = 0x02
BUFFER_A_FLAG_BUFFER_B = 0x01
FLAGS2_BUFFER_D = 0x40

# File name extensions
SAVE_EXTENSION = '.Civ6Save'
TSV_EXTENSION = '.tsv'
