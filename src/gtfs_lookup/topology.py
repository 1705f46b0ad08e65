"""Trip/stop topology from stop_times.txt."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import StopTripTopology
from .rows import iter_rows

log = logging.getLogger(__name__)


def build_stop_trip_topology(stop_times_path: str | Path) -> StopTripTopology:
    """Build ``trip_id -> [stop_id]`` and ``stop_id -> [trip_id]`` in one pass.

    Both sides are de-duplicated, keeping the order in which ids are first
    encountered in the file. Rows missing either id are skipped.
    """
    # dicts with None values act as insertion-ordered sets until finalization
    trip_stops: dict[str, dict[str, None]] = {}
    stop_trips: dict[str, dict[str, None]] = {}

    for row in iter_rows(stop_times_path):
        stop_id = row.get("stop_id")
        trip_id = row.get("trip_id")
        if stop_id is None or trip_id is None:
            continue
        trip_stops.setdefault(trip_id, {})[stop_id] = None
        stop_trips.setdefault(stop_id, {})[trip_id] = None

    log.info("Built <trip-id> : <stop-id>[] table (%d trips, %d stops)", len(trip_stops), len(stop_trips))
    return StopTripTopology.model_construct(
        trip_stop_ids={trip_id: list(stops) for trip_id, stops in trip_stops.items()},
        stop_trip_ids={stop_id: list(trips) for stop_id, trips in stop_trips.items()},
    )
