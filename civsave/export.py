"""
Tabular export of the tile table.
"""

import json
from pathlib import Path
from typing import Any, Iterable

from civsave.log import log


def ensure_extension(filename: str, extension: str) -> str:
    """Append `extension` unless the name already ends with it."""
    if filename.endswith(extension):
        return filename
    return filename + extension


def rows_to_tsv(rows: Iterable[dict[str, Any]]) -> str:
    """
    Render rows as tab-separated text.

    The first row's keys become the header line; each value is written as
    JSON, so hex strings keep their quotes and numbers stay bare.
    """
    rows = list(rows)
    if not rows:
        return ''

    headers = list(rows[0])
    lines = ['\t'.join(headers)]
    for row in rows:
        lines.append('\t'.join(json.dumps(row[name]) for name in headers))
    return '\n'.join(lines) + '\n'


def write_tsv(rows: Iterable[dict[str, Any]], path: Path) -> None:
    text = rows_to_tsv(rows)
    path.write_text(text)
    log.debug(f'Wrote {len(text)} characters to {path}')
