"""Build ``shape_id -> [(lon, lat), ...]`` from shapes.txt."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import Coordinate
from .rows import iter_rows

log = logging.getLogger(__name__)


def build_shape_geometry(shapes_path: str | Path) -> dict[str, list[Coordinate]]:
    """Collect the points of every shape in file order.

    Points are appended in the order rows appear in the file; ``shape_pt_sequence``
    is not used to reorder them. Rows without a ``shape_id`` or with
    non-numeric coordinates are skipped.
    """
    shapes: dict[str, list[Coordinate]] = {}
    skipped = 0

    for row in iter_rows(shapes_path):
        shape_id = row.get("shape_id")
        lon = row.get_float("shape_pt_lon")
        lat = row.get_float("shape_pt_lat")
        if shape_id is None or lon is None or lat is None:
            skipped += 1
            continue
        shapes.setdefault(shape_id, []).append((lon, lat))

    log.info("Built <shape-id> : <LineString> table (%d shapes, %d rows skipped)", len(shapes), skipped)
    return shapes
