"""Lookup tables and map tiles derived from GTFS transit feeds."""

from .config import PipelineConfig
from .distance_along import build_distance_along_index, distance_along_key
from .errors import GtfsLookupError, MissingFeedFileError, TilerError, TilerNotFoundError
from .features import iter_route_line_features, iter_stop_point_features, write_ldgeojson
from .feed import REQUIRED_FILES, unpack_feed
from .lookups import read_route_line_lookup, write_distance_along_lookup, write_route_line_lookup
from .merge import merge_feeds
from .models import (
    Feature,
    GtfsLookups,
    PipelineResult,
    RouteLineLookup,
    RouteTripShapeIndex,
    StopTripTopology,
)
from .pipeline import build_lookups, run_from_zip, run_pipeline
from .rows import Row, iter_rows
from .service_area import compute_service_area
from .shapes import build_shape_geometry
from .tiler import run_tippecanoe
from .topology import build_stop_trip_topology
from .trips import build_route_trip_shape_index

__all__ = [
    "Feature",
    "GtfsLookupError",
    "GtfsLookups",
    "MissingFeedFileError",
    "PipelineConfig",
    "PipelineResult",
    "REQUIRED_FILES",
    "RouteLineLookup",
    "RouteTripShapeIndex",
    "Row",
    "StopTripTopology",
    "TilerError",
    "TilerNotFoundError",
    "build_distance_along_index",
    "build_lookups",
    "build_route_trip_shape_index",
    "build_shape_geometry",
    "build_stop_trip_topology",
    "compute_service_area",
    "distance_along_key",
    "iter_route_line_features",
    "iter_rows",
    "iter_stop_point_features",
    "merge_feeds",
    "read_route_line_lookup",
    "run_from_zip",
    "run_pipeline",
    "run_tippecanoe",
    "unpack_feed",
    "write_distance_along_lookup",
    "write_ldgeojson",
    "write_route_line_lookup",
]
