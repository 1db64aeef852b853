#!/usr/bin/env python3
"""
Decompress and recompress a Civilization VI save file without changes.

Usage:
    uv run python scripts/recompress_save.py <save> [--output OUTPUT]

Useful to check that a save survives the round-trip before editing it:
the tile table is decoded before and after and must match.
"""

import argparse
import sys
from pathlib import Path

from civsave.errors import FormatError
from civsave.log import log
from civsave.model.save_file import SaveFile


def main() -> int:
    parser = argparse.ArgumentParser(description='Round-trip a .Civ6Save file through the codec')
    parser.add_argument('save', type=Path, help='Input save file')
    parser.add_argument(
        '--output',
        '-o',
        type=Path,
        help='Output save file (default: <input>_recompressed.Civ6Save)',
    )
    args = parser.parse_args()

    input_path: Path = args.save
    output_path: Path = args.output or input_path.with_name(f'{input_path.stem}_recompressed{input_path.suffix}')

    if not input_path.exists():
        log.error(f'Input file not found: {input_path}')
        return 1

    log.info(f'Reading save file: {input_path}')
    try:
        save = SaveFile.load(input_path)
        before = save.to_structured()
        log.info(f'Decompressed size: {len(save.decompressed())} bytes, {len(before)} tiles')

        rebuilt = SaveFile.from_bytes(save.modify().to_bytes())
        after = rebuilt.to_structured()
    except FormatError as e:
        log.error(f'Round-trip failed: {e}')
        return 1

    if before != after:
        log.error('Tile table changed during round-trip, not writing output')
        return 1

    rebuilt.save(output_path)
    log.info(f'Saved {len(rebuilt.to_bytes())} bytes to {output_path}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
