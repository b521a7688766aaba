"""Delimited-text ingest and output for sentence rows.

Rows are plain lists of strings; column 0 is the sentence to speak and any
further columns are carried through untouched. Comma or tab separated, UTF-8.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import RowParseError


def delimiter_for(tabs: bool) -> str:
    return "\t" if tabs else ","


def read_rows(
    path: str | Path, tabs: bool = False, has_header: bool = False
) -> Tuple[Optional[List[str]], List[List[str]]]:
    """Read every row of a CSV/TSV source.

    Args:
        path: Source file
        tabs: Tab separated instead of comma separated
        has_header: Treat the first row as a header

    Returns:
        (header or None, data rows in source order)

    Raises:
        FileNotFoundError: If the source doesn't exist
        RowParseError: If any row has no fields
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")

    header: Optional[List[str]] = None
    rows: List[List[str]] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f, delimiter=delimiter_for(tabs))
        try:
            for record in reader:
                if not record:
                    raise RowParseError(
                        "All rows in the source must have at least one field",
                        line=reader.line_num,
                    )
                if has_header and header is None:
                    header = record
                    continue
                rows.append(record)
        except csv.Error as e:
            raise RowParseError(f"Malformed row in {path}: {e}", line=reader.line_num)
        except UnicodeDecodeError as e:
            raise RowParseError(f"Source {path} is not valid UTF-8: {e}") from e
    return header, rows


def write_rows(
    path: str | Path,
    rows: Iterable[Sequence[str]],
    tabs: bool = False,
    header: Optional[Sequence[str]] = None,
) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter=delimiter_for(tabs))
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
