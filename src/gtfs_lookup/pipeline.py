"""End-to-end pipeline: GTFS feed in, lookup tables / LD-GeoJSON / tiles out."""

from __future__ import annotations

import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import BinaryIO

from .config import PipelineConfig
from .distance_along import build_distance_along_index
from .feed import check_feed_dir, unpack_feed
from .features import LDGEOJSON_FILENAME, iter_route_line_features, iter_stop_point_features, write_ldgeojson
from .lookups import write_distance_along_lookup, write_json, write_route_line_lookup
from .models import GtfsLookups, PipelineResult
from .service_area import SERVICE_AREA_FILENAME, compute_service_area
from .shapes import build_shape_geometry
from .tiler import run_tippecanoe
from .topology import build_stop_trip_topology
from .trips import build_route_trip_shape_index

log = logging.getLogger(__name__)

TILES_DIRNAME = "route-tiles"


def build_lookups(feed_dir: str | Path, concurrent: bool = True) -> GtfsLookups:
    """Build every index from an unpacked feed.

    Each builder makes its own pass over one file and owns its result, so the
    passes can run side by side. All of them finish before this returns.
    """
    feed_dir = check_feed_dir(feed_dir)
    jobs = {
        "shapes": (build_shape_geometry, feed_dir / "shapes.txt"),
        "route_trip_shapes": (build_route_trip_shape_index, feed_dir / "trips.txt"),
        "topology": (build_stop_trip_topology, feed_dir / "stop_times.txt"),
        "distance_along": (build_distance_along_index, feed_dir / "stop_times.txt"),
    }

    if not concurrent:
        results = {name: fn(path) for name, (fn, path) in jobs.items()}
        return GtfsLookups.model_construct(**results)

    with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
        futures = {name: executor.submit(fn, path) for name, (fn, path) in jobs.items()}
        results = {name: future.result() for name, future in futures.items()}
    return GtfsLookups.model_construct(**results)


def run_pipeline(feed_dir: str | Path, config: PipelineConfig) -> PipelineResult:
    """Build all indices from ``feed_dir`` and write every artifact to ``config.output_dir``.

    Nothing is written until every index has been built, and each file is
    moved into place only once complete.
    """
    feed_dir = Path(feed_dir)
    lookups = build_lookups(feed_dir, concurrent=config.concurrent)

    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    lookup_path = write_route_line_lookup(lookups.route_line_lookup(), output_dir)
    distance_path = write_distance_along_lookup(lookups.distance_along, output_dir)

    log.info("Starting creation of routeline LDGeoJSON")
    line_features = list(
        iter_route_line_features(feed_dir / "routes.txt", lookups.route_trip_shapes, lookups.shapes)
    )
    point_features = list(
        iter_stop_point_features(feed_dir / "stops.txt", lookups.topology, lookups.route_trip_shapes)
    )
    ldgeojson_path = output_dir / LDGEOJSON_FILENAME
    write_ldgeojson(line_features + point_features, ldgeojson_path)

    service_area_path = None
    service_area = compute_service_area(
        feed_dir,
        config.filtered_agency_ids,
        config.filtered_route_ids,
        config.service_area_buffer_miles,
    )
    if service_area is None:
        log.warning("No stops left after filtering; %s not written", SERVICE_AREA_FILENAME)
    else:
        service_area_path = write_json(service_area, output_dir / SERVICE_AREA_FILENAME, indent=2)

    tiles_path = None
    if config.build_tiles:
        tiles_path = run_tippecanoe(
            ldgeojson_path,
            output_dir / TILES_DIRNAME,
            config.tiles_layer_name,
            min_zoom=config.tiles_min_zoom,
        )

    log.info("Finished writing output files to: %s", output_dir)
    return PipelineResult(
        route_line_lookup_path=lookup_path,
        distance_along_lookup_path=distance_path,
        ldgeojson_path=ldgeojson_path,
        service_area_path=service_area_path,
        tiles_path=tiles_path,
        shape_count=len(lookups.shapes),
        route_count=len(lookups.route_trip_shapes.routes),
        trip_count=len(lookups.route_trip_shapes.trip_routes),
        stop_count=len(lookups.topology.stop_trip_ids),
        line_feature_count=len(line_features),
        point_feature_count=len(point_features),
    )


def run_from_zip(feed: str | Path | BinaryIO, config: PipelineConfig) -> PipelineResult:
    """Unpack a zipped feed into a temporary directory and run the pipeline on it."""
    with tempfile.TemporaryDirectory(prefix="gtfs-") as tmp:
        feed_dir = unpack_feed(feed, tmp)
        return run_pipeline(feed_dir, config)
