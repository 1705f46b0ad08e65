"""Merge several unpacked GTFS feeds into one, prefixing identifiers per feed."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from .errors import MissingFeedFileError
from .feed import REQUIRED_FILES
from .lookups import atomic_writer
from .rows import iter_rows, read_header

log = logging.getLogger(__name__)

OPTIONAL_FILES = ("agency.txt", "calendar.txt", "calendar_dates.txt")

ID_COLUMNS = frozenset(
    {"agency_id", "route_id", "trip_id", "stop_id", "shape_id", "service_id", "parent_station"}
)


def merge_feeds(feed_dirs: dict[str, str | Path], output_dir: str | Path) -> Path:
    """Concatenate each GTFS file across ``feed_dirs`` into ``output_dir``.

    ``feed_dirs`` maps a prefix to an unpacked feed. Every non-empty value in
    an identifier column is rewritten as ``<prefix>_<value>`` so ids from
    different feeds cannot collide. The merged header is the union of the
    feeds' headers in first-seen order.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    feeds = {prefix: Path(path) for prefix, path in feed_dirs.items()}

    for filename in REQUIRED_FILES + OPTIONAL_FILES:
        sources = [(prefix, feed / filename) for prefix, feed in feeds.items()]
        present = [(prefix, path) for prefix, path in sources if path.is_file()]
        if filename in REQUIRED_FILES and len(present) != len(sources):
            missing = next(path for _, path in sources if not path.is_file())
            raise MissingFeedFileError(filename, f"not found in {missing.parent}")
        if not present:
            continue
        rows = _merge_file(present, output_dir / filename)
        log.info("Merged %s from %d feeds (%d rows)", filename, len(present), rows)

    return output_dir


def _merge_file(sources: list[tuple[str, Path]], dest: Path) -> int:
    columns: dict[str, None] = {}
    for _, path in sources:
        for name in read_header(path):
            if name:
                columns[name] = None
    fieldnames = list(columns)

    count = 0
    with atomic_writer(dest) as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(fieldnames)
        for prefix, path in sources:
            for row in iter_rows(path):
                values = []
                for name in fieldnames:
                    value = row.get(name) or ""
                    if value and name in ID_COLUMNS:
                        value = f"{prefix}_{value}"
                    values.append(value)
                writer.writerow(values)
                count += 1
    return count
