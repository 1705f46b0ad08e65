"""Pipeline configuration, read from the environment or built directly."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field


def _split_ids(value: str | None) -> set[str]:
    if not value:
        return set()
    return {part.strip() for part in value.split(",") if part.strip()}


def _truthy(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class PipelineConfig(BaseModel):
    """Settings for one pipeline run.

    Attributes:
        gtfs_zip_path: Zipped GTFS feed to process.
        output_dir: Directory the lookup tables, LD-GeoJSON and tiles are written to.
        filtered_agency_ids: Agencies excluded from the service area.
        filtered_route_ids: Routes excluded from the service area.
        build_tiles: Run tippecanoe over the LD-GeoJSON after it is written.
        tiles_min_zoom: Lowest zoom level tippecanoe generates.
        tiles_layer_name: Vector layer name inside the tiles.
        service_area_buffer_miles: Buffer applied around the stop hull.
        concurrent: Build the indices in parallel threads.
        log_level: Logging level name for the CLI.
    """

    gtfs_zip_path: Path | None = None
    output_dir: Path = Path("output")
    filtered_agency_ids: set[str] = Field(default_factory=set)
    filtered_route_ids: set[str] = Field(default_factory=set)
    build_tiles: bool = False
    tiles_min_zoom: int = 7
    tiles_layer_name: str = "route-lines"
    service_area_buffer_miles: float = 5.0
    concurrent: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PipelineConfig:
        """Build a config from ``GTFS_ZIP_PATH``, ``OUTPUT_DIR_PATH`` and friends."""
        env = os.environ if environ is None else environ
        defaults = cls()
        zip_path = env.get("GTFS_ZIP_PATH")
        return cls(
            gtfs_zip_path=Path(zip_path) if zip_path else None,
            output_dir=Path(env.get("OUTPUT_DIR_PATH") or defaults.output_dir),
            filtered_agency_ids=_split_ids(env.get("FILTERED_AGENCY_IDS")),
            filtered_route_ids=_split_ids(env.get("MANUALLY_FILTERED_ROUTE_IDS")),
            build_tiles=_truthy(env.get("BUILD_TILES"), defaults.build_tiles),
            tiles_min_zoom=int(env.get("TILES_MIN_ZOOM") or defaults.tiles_min_zoom),
            tiles_layer_name=env.get("TILES_LAYER_NAME") or defaults.tiles_layer_name,
            service_area_buffer_miles=float(
                env.get("SERVICE_AREA_BUFFER_MILES") or defaults.service_area_buffer_miles
            ),
            concurrent=_truthy(env.get("CONCURRENT_BUILD"), defaults.concurrent),
            log_level=(env.get("LOG_LEVEL") or defaults.log_level).upper(),
        )
