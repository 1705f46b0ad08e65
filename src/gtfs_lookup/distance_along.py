"""Per-stop distance along the trip's shape, from stop_times.txt."""

from __future__ import annotations

import logging
from pathlib import Path

from .rows import iter_rows

log = logging.getLogger(__name__)

KEY_SEPARATOR = "|"


def distance_along_key(stop_id: str, trip_id: str) -> str:
    """Composite ``"<stop_id>|<trip_id>"`` key.

    Assumes neither identifier contains a pipe.
    """
    return f"{stop_id}{KEY_SEPARATOR}{trip_id}"


def build_distance_along_index(stop_times_path: str | Path) -> dict[str, float]:
    """Map ``"<stop_id>|<trip_id>"`` to ``shape_dist_traveled``.

    Only rows with both ids and a finite numeric distance contribute; the last
    row for a given pair wins.
    """
    index: dict[str, float] = {}
    for row in iter_rows(stop_times_path):
        stop_id = row.get("stop_id")
        trip_id = row.get("trip_id")
        distance = row.get_float("shape_dist_traveled")
        if stop_id is None or trip_id is None or distance is None:
            continue
        index[distance_along_key(stop_id, trip_id)] = distance

    log.info("Built <stop-id|trip-id> : <distance-along> table (%d entries)", len(index))
    return index
