"""Streaming CSV row access for GTFS text files.

Columns are resolved by name from each file's header, so feeds that order
their columns differently are read the same way. Rows that cannot be decoded
or whose field count does not match the header are skipped.
"""

from __future__ import annotations

import csv
import logging
import math
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import MissingFeedFileError

log = logging.getLogger(__name__)


class Row:
    """A single CSV record addressable by column name.

    ``get`` returns ``None`` both for columns the file does not declare and
    for blank values, so callers only ever test one "missing" case. Other
    values are returned as written, surrounding whitespace included.
    """

    __slots__ = ("_columns", "_values", "line_num")

    def __init__(self, columns: dict[str, int], values: list[str], line_num: int = 0):
        self._columns = columns
        self._values = values
        self.line_num = line_num

    def get(self, column: str) -> str | None:
        idx = self._columns.get(column)
        if idx is None:
            return None
        value = self._values[idx]
        # identifiers are compared byte for byte, so only blank values collapse
        return value if value.strip() else None

    def get_float(self, column: str) -> float | None:
        """Parse a column as a finite float, or ``None`` if missing or not numeric.

        Python's digit-grouping underscores (``1_000``) are not GTFS numbers.
        """
        value = self.get(column)
        if value is None or "_" in value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return number

    def __getitem__(self, column: str) -> str | None:
        return self.get(column)

    def __repr__(self) -> str:
        fields = {name: self._values[idx] for name, idx in self._columns.items()}
        return f"Row({fields!r})"


def _decode_lines(fh: Iterable[bytes], path: Path) -> Iterator[str]:
    first = True
    for line_no, raw in enumerate(fh, start=1):
        try:
            # utf-8-sig strips the BOM some producers put before the header
            line = raw.decode("utf-8-sig" if first else "utf-8")
        except UnicodeDecodeError:
            log.warning("%s:%d: skipping line that is not valid UTF-8", path.name, line_no)
            continue
        first = False
        yield line


def iter_rows(path: str | Path) -> Iterator[Row]:
    """Lazily yield the data rows of a GTFS CSV file.

    Raises ``MissingFeedFileError`` if the file cannot be opened. The iterator
    is single-use; reopen the file to read it again.
    """
    path = Path(path)
    try:
        fh = path.open("rb")
    except OSError as exc:
        raise MissingFeedFileError(path.name, str(exc)) from exc

    with fh:
        reader = csv.reader(_decode_lines(fh, path))
        try:
            header = next(reader)
        except StopIteration:
            return
        columns = {name.strip(): idx for idx, name in enumerate(header)}
        width = len(header)

        while True:
            try:
                values = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                log.warning("%s:%d: skipping malformed row (%s)", path.name, reader.line_num, exc)
                continue
            if not values:
                continue
            if len(values) != width:
                log.debug(
                    "%s:%d: skipping row with %d fields, header has %d",
                    path.name, reader.line_num, len(values), width,
                )
                continue
            yield Row(columns, values, reader.line_num)


def read_header(path: str | Path) -> list[str]:
    """Return the column names declared by a GTFS CSV file."""
    path = Path(path)
    try:
        fh = path.open("rb")
    except OSError as exc:
        raise MissingFeedFileError(path.name, str(exc)) from exc
    with fh:
        reader = csv.reader(_decode_lines(fh, path))
        header = next(reader, [])
    return [name.strip() for name in header]
