"""Resolve which shape each trip of each route follows, from trips.txt."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import RouteTripShapeIndex
from .rows import iter_rows

log = logging.getLogger(__name__)


def build_route_trip_shape_index(trips_path: str | Path) -> RouteTripShapeIndex:
    """Build ``route_id -> trip_id -> shape_id`` and the reverse ``trip_id -> route_ids``.

    Later rows for the same (route_id, trip_id) pair overwrite earlier ones.
    A trip listed under several routes keeps every route in the reverse index.
    Whether ``shape_id`` exists in shapes.txt is not checked here.
    """
    routes: dict[str, dict[str, str]] = {}
    trip_routes: dict[str, dict[str, None]] = {}

    for row in iter_rows(trips_path):
        route_id = row.get("route_id")
        trip_id = row.get("trip_id")
        shape_id = row.get("shape_id")
        if route_id is None or trip_id is None or shape_id is None:
            continue
        routes.setdefault(route_id, {})[trip_id] = shape_id
        trip_routes.setdefault(trip_id, {})[route_id] = None

    log.info(
        "Built <route-id, trip-id> : <shape-id> table (%d routes, %d trips)",
        len(routes), len(trip_routes),
    )
    return RouteTripShapeIndex.model_construct(
        routes=routes,
        trip_routes={trip_id: list(route_ids) for trip_id, route_ids in trip_routes.items()},
    )
