"""Rough polygon of the area served by local transit.

The polygon is a convex hull around every stop served by at least one trip of
a non-filtered route, buffered by a fixed distance. Filtering by agency or
route lets long-distance services (intercity rail, say) be left out so they do
not stretch the hull.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pyproj import CRS, Transformer
from shapely.geometry import MultiPoint, mapping
from shapely.ops import transform

from .rows import iter_rows

log = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344
SERVICE_AREA_FILENAME = "transit-service-area.json"


def filter_route_ids(
    routes_path: str | Path,
    agency_ids: Iterable[str] = (),
    route_ids: Iterable[str] = (),
) -> set[str]:
    """Route ids belonging to a filtered agency or listed explicitly."""
    agency_ids = set(agency_ids)
    filtered = set(route_ids)
    if not agency_ids:
        return filtered
    for row in iter_rows(routes_path):
        route_id = row.get("route_id")
        if route_id is not None and row.get("agency_id") in agency_ids:
            filtered.add(route_id)
    return filtered


def filter_trip_ids(trips_path: str | Path, filtered_route_ids: set[str]) -> set[str]:
    """Trip ids that run on a filtered route."""
    if not filtered_route_ids:
        return set()
    filtered: set[str] = set()
    for row in iter_rows(trips_path):
        trip_id = row.get("trip_id")
        if trip_id is not None and row.get("route_id") in filtered_route_ids:
            filtered.add(trip_id)
    return filtered


def interesting_stop_ids(stop_times_path: str | Path, filtered_trip_ids: set[str]) -> set[str]:
    """Stops visited by at least one trip that is not filtered.

    A stop shared by a filtered and a local route is kept.
    """
    stops: set[str] = set()
    for row in iter_rows(stop_times_path):
        stop_id = row.get("stop_id")
        trip_id = row.get("trip_id")
        if stop_id is None or trip_id is None or trip_id in filtered_trip_ids:
            continue
        stops.add(stop_id)
    return stops


def stop_coordinates(stops_path: str | Path, stop_ids: set[str]) -> list[tuple[float, float]]:
    points: list[tuple[float, float]] = []
    for row in iter_rows(stops_path):
        if row.get("stop_id") not in stop_ids:
            continue
        lon = row.get_float("stop_lon")
        lat = row.get_float("stop_lat")
        if lon is not None and lat is not None:
            points.append((lon, lat))
    return points


def buffered_hull(points: list[tuple[float, float]], buffer_miles: float) -> Any:
    """Convex hull of lon/lat ``points`` buffered by ``buffer_miles``.

    The buffer is applied in an azimuthal equidistant projection centred on
    the hull so the distance is in metres rather than degrees.
    """
    hull = MultiPoint(points).convex_hull
    centroid = hull.centroid
    local_crs = CRS.from_proj4(
        f"+proj=aeqd +lat_0={centroid.y} +lon_0={centroid.x} +datum=WGS84 +units=m +no_defs"
    )
    wgs84 = CRS.from_epsg(4326)
    to_local = Transformer.from_crs(wgs84, local_crs, always_xy=True)
    to_wgs84 = Transformer.from_crs(local_crs, wgs84, always_xy=True)

    projected = transform(to_local.transform, hull)
    buffered = projected.buffer(buffer_miles * METERS_PER_MILE)
    return transform(to_wgs84.transform, buffered)


def compute_service_area(
    feed_dir: str | Path,
    filtered_agency_ids: Iterable[str] = (),
    filtered_route_ids: Iterable[str] = (),
    buffer_miles: float = 5.0,
) -> dict[str, Any] | None:
    """Return the service area as a GeoJSON Feature, or ``None`` if no stop qualifies."""
    feed_dir = Path(feed_dir)
    routes = filter_route_ids(feed_dir / "routes.txt", filtered_agency_ids, filtered_route_ids)
    trips = filter_trip_ids(feed_dir / "trips.txt", routes)
    stop_ids = interesting_stop_ids(feed_dir / "stop_times.txt", trips)
    points = stop_coordinates(feed_dir / "stops.txt", stop_ids)
    log.info(
        "Service area: %d filtered routes, %d filtered trips, %d stops",
        len(routes), len(trips), len(points),
    )
    if not points:
        return None

    polygon = buffered_hull(points, buffer_miles)
    return {"type": "Feature", "properties": {}, "geometry": mapping(polygon)}
