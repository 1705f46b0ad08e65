"""Assemble route LineString and stop Point features for tiling."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .lookups import atomic_writer
from .models import (
    Coordinate,
    Feature,
    LineStringGeometry,
    PointGeometry,
    RouteTripShapeIndex,
    StopTripTopology,
)
from .rows import iter_rows

log = logging.getLogger(__name__)

LDGEOJSON_FILENAME = "routelines.ldgeojson"


def _color(value: str | None) -> str | None:
    if value is None:
        return None
    return value if value.startswith("#") else f"#{value}"


def iter_route_line_features(
    routes_path: str | Path,
    route_trip_shapes: RouteTripShapeIndex,
    shapes: dict[str, list[Coordinate]],
) -> Iterator[Feature]:
    """Yield one LineString per distinct shape of each route in routes.txt.

    Trips sharing a shape are folded into that shape's ``trip_ids`` property
    (comma-joined, encounter order). Trips whose shape has no geometry are
    left out; a route with no resolvable trips yields nothing.
    """
    for row in iter_rows(routes_path):
        route_id = row.get("route_id")
        if route_id is None:
            continue
        trips = route_trip_shapes.trips_for_route(route_id)
        if not trips:
            continue

        route_color = _color(row.get("route_color"))
        route_text_color = _color(row.get("route_text_color"))

        seen_shapes: dict[str, Feature] = {}
        for trip_id, shape_id in trips.items():
            coordinates = shapes.get(shape_id)
            if not coordinates:
                log.debug("route %s trip %s: shape %s has no geometry", route_id, trip_id, shape_id)
                continue
            feature = seen_shapes.get(shape_id)
            if feature is not None:
                feature.properties["trip_ids"] = f"{feature.properties['trip_ids']},{trip_id}"
                continue

            properties: dict[str, str | float | int] = {"route_id": route_id, "trip_ids": trip_id}
            if route_color is not None:
                properties["route_color"] = route_color
            if route_text_color is not None:
                properties["route_text_color"] = route_text_color
            seen_shapes[shape_id] = Feature(
                geometry=LineStringGeometry(coordinates=coordinates),
                properties=properties,
            )

        yield from seen_shapes.values()


def iter_stop_point_features(
    stops_path: str | Path,
    topology: StopTripTopology,
    route_trip_shapes: RouteTripShapeIndex | None = None,
) -> Iterator[Feature]:
    """Yield one Point per stop in stops.txt, annotated with the trips serving it.

    Stops without finite ``stop_lat``/``stop_lon`` are skipped. When
    ``route_trip_shapes`` is given, the routes of those trips are added as
    ``route_ids``.
    """
    for row in iter_rows(stops_path):
        stop_id = row.get("stop_id")
        lon = row.get_float("stop_lon")
        lat = row.get_float("stop_lat")
        if stop_id is None or lon is None or lat is None:
            continue

        trip_ids = topology.stop_trip_ids.get(stop_id, [])
        properties: dict[str, str | float | int] = {"stop_id": stop_id}
        stop_name = row.get("stop_name")
        if stop_name is not None:
            properties["stop_name"] = stop_name
        properties["trip_ids"] = ",".join(trip_ids)
        if route_trip_shapes is not None:
            properties["route_ids"] = ",".join(route_trip_shapes.route_ids_for_trips(trip_ids))

        yield Feature(geometry=PointGeometry(coordinates=(lon, lat)), properties=properties)


def write_ldgeojson(features: Iterable[Feature], path: str | Path) -> int:
    """Write features as line-delimited GeoJSON, one Feature per line.

    Returns the number of features written.
    """
    count = 0
    with atomic_writer(path) as f:
        for feature in features:
            f.write(feature.model_dump_json())
            f.write("\n")
            count += 1
    log.info("Wrote %d features to %s", count, path)
    return count
