"""CSV export of query results."""

import csv
import io
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, TextIO, Union

from .logging_config import get_logger

logger = get_logger(__name__)


def _cells(value: Any) -> List[str]:
    if isinstance(value, (tuple, list)):
        return [_cell(v) for v in value]
    return [_cell(value)]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.4f}".rstrip("0").rstrip(".")
    if isinstance(value, (list, tuple, set, frozenset)):
        return ";".join(_cell(v) for v in value)
    return str(value)


def write_csv(
    rows: Iterable[Any],
    destination: Union[str, Path, TextIO],
    header: Optional[Sequence[str]] = None,
    grouped: bool = False,
) -> int:
    """Write query results as CSV, iterating `rows` once.

    Args:
        rows: Values or tuples from `map_into`; with `grouped`, pairs of
            ``(key, values)`` whose key is prepended to every row
        destination: File path or open text stream
        header: Optional column names
        grouped: Whether `rows` comes from a grouped stream

    Returns:
        Number of data rows written

    Missing values become empty cells.
    """
    if isinstance(destination, (str, Path)):
        with open(destination, "w", newline="", encoding="utf-8") as f:
            count = _write(rows, f, header, grouped)
        logger.info(f"Wrote {count} rows to {destination}")
        return count
    return _write(rows, destination, header, grouped)


def _write(rows: Iterable[Any], stream: TextIO, header: Optional[Sequence[str]], grouped: bool) -> int:
    writer = csv.writer(stream)
    if header is not None:
        writer.writerow(header)
    count = 0
    for row in rows:
        if grouped:
            key, values = row
            for value in values:
                writer.writerow([_cell(key)] + _cells(value))
                count += 1
        else:
            writer.writerow(_cells(row))
            count += 1
    return count


def to_csv_string(rows: Iterable[Any], header: Optional[Sequence[str]] = None, grouped: bool = False) -> str:
    output = io.StringIO()
    _write(rows, output, header, grouped)
    return output.getvalue()
