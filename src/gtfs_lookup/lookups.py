"""Serialization of the lookup tables to their JSON file formats."""

from __future__ import annotations

import json
import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from .models import RouteLineLookup

log = logging.getLogger(__name__)

ROUTE_LINE_LOOKUP_FILENAME = "route-line-lookup.json"
DISTANCE_ALONG_LOOKUP_FILENAME = "distance-along-lookup.json"


@contextmanager
def atomic_writer(path: str | Path) -> Iterator[TextIO]:
    """Open a temporary file beside ``path`` and move it into place on success.

    If the body raises, the temporary file is removed and ``path`` is left
    untouched.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            yield tmp
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)


def write_route_line_lookup(lookup: RouteLineLookup, output_dir: str | Path) -> Path:
    """Write ``route-line-lookup.json`` into ``output_dir``."""
    path = Path(output_dir) / ROUTE_LINE_LOOKUP_FILENAME
    with atomic_writer(path) as f:
        f.write(lookup.model_dump_json(by_alias=True))
    log.info("Wrote %s", path)
    return path


def read_route_line_lookup(path: str | Path) -> RouteLineLookup:
    return RouteLineLookup.model_validate_json(Path(path).read_text(encoding="utf-8"))


def write_distance_along_lookup(index: dict[str, float], output_dir: str | Path) -> Path:
    """Write the flat ``{"<stop_id>|<trip_id>": distance}`` table."""
    path = Path(output_dir) / DISTANCE_ALONG_LOOKUP_FILENAME
    with atomic_writer(path) as f:
        json.dump(index, f, allow_nan=False)
    log.info("Wrote %s (%d entries)", path, len(index))
    return path


def write_json(data: dict, path: str | Path, indent: int | None = None) -> Path:
    path = Path(path)
    with atomic_writer(path) as f:
        json.dump(data, f, indent=indent)
    return path
