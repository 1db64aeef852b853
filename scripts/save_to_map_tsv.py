#!/usr/bin/env python3
"""
Export the map tile table of a Civilization VI save file as TSV.

Usage:
    uv run python scripts/save_to_map_tsv.py <save>[.Civ6Save] <output>[.tsv]

Each line holds one tile: grid coordinates, offset and length in the
decompressed data, every header field, and the optional sub-buffers as hex.
"""

import argparse
import sys
from pathlib import Path

from civsave.const import SAVE_EXTENSION, TSV_EXTENSION
from civsave.errors import FormatError
from civsave.export import ensure_extension, write_tsv
from civsave.log import log
from civsave.model.save_file import SaveFile


def main() -> int:
    parser = argparse.ArgumentParser(description='Export the tile table of a .Civ6Save file as TSV')
    parser.add_argument('save', help=f'Input save file ({SAVE_EXTENSION} is appended if missing)')
    parser.add_argument('output', help=f'Output table ({TSV_EXTENSION} is appended if missing)')
    args = parser.parse_args()

    input_path = Path(ensure_extension(args.save, SAVE_EXTENSION))
    output_path = Path(ensure_extension(args.output, TSV_EXTENSION))

    if not input_path.exists():
        log.error(f'Input file not found: {input_path}')
        return 1

    log.info(f'Reading save file: {input_path}')
    try:
        rows = SaveFile.load(input_path).to_structured()
    except FormatError as e:
        log.error(f'Failed to decode save file: {e}')
        return 1

    write_tsv(rows, output_path)
    log.info(f'Wrote {len(rows)} tiles to {output_path}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
