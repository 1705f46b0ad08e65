"""Pydantic data models for the GTFS lookup pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# (lon, lat)
Coordinate = tuple[float, float]


class RouteTripShapeIndex(BaseModel):
    """``route_id -> trip_id -> shape_id`` plus the reverse ``trip_id -> [route_id]``."""

    routes: dict[str, dict[str, str]] = Field(default_factory=dict)
    trip_routes: dict[str, list[str]] = Field(default_factory=dict)

    def trips_for_route(self, route_id: str) -> dict[str, str]:
        return self.routes.get(route_id, {})

    def route_ids_for_trips(self, trip_ids: list[str]) -> list[str]:
        """Distinct route ids serving any of ``trip_ids``, in first-seen order."""
        seen: dict[str, None] = {}
        for trip_id in trip_ids:
            for route_id in self.trip_routes.get(trip_id, ()):
                seen[route_id] = None
        return list(seen)


class StopTripTopology(BaseModel):
    """Which stops each trip visits and which trips serve each stop."""

    trip_stop_ids: dict[str, list[str]] = Field(default_factory=dict)
    stop_trip_ids: dict[str, list[str]] = Field(default_factory=dict)


class LineStringGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: list[Coordinate]


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: Coordinate


class Feature(BaseModel):
    """A GeoJSON Feature with a flat property bag.

    Vector tiles cannot encode array-valued properties, so multi-valued fields
    are stored as comma-joined strings.
    """

    type: Literal["Feature"] = "Feature"
    geometry: LineStringGeometry | PointGeometry = Field(discriminator="type")
    properties: dict[str, str | float | int] = Field(default_factory=dict)


class RouteLineLookup(BaseModel):
    """The ``route-line-lookup.json`` document consumed by the route-line clipper."""

    model_config = ConfigDict(populate_by_name=True)

    stop_trip_shape_lookup: dict[str, dict[str, str]] = Field(alias="stopTripShapeLookup")
    shape_id_line_string_lookup: dict[str, list[Coordinate]] = Field(alias="shapeIdLineStringLookup")
    trip_id_stop_ids_lookup: dict[str, list[str]] = Field(alias="tripIdStopIdsLookup")


class GtfsLookups(BaseModel):
    """All indices built from one feed."""

    shapes: dict[str, list[Coordinate]]
    route_trip_shapes: RouteTripShapeIndex
    topology: StopTripTopology
    distance_along: dict[str, float]

    def route_line_lookup(self) -> RouteLineLookup:
        """Wrap the built indices for serialization without copying them."""
        return RouteLineLookup.model_construct(
            stopTripShapeLookup=self.route_trip_shapes.routes,
            shapeIdLineStringLookup=self.shapes,
            tripIdStopIdsLookup=self.topology.trip_stop_ids,
        )


class PipelineResult(BaseModel):
    """Summary of a completed pipeline run."""

    route_line_lookup_path: Path
    distance_along_lookup_path: Path
    ldgeojson_path: Path
    service_area_path: Path | None = None
    tiles_path: Path | None = None
    shape_count: int
    route_count: int
    trip_count: int
    stop_count: int
    line_feature_count: int
    point_feature_count: int
