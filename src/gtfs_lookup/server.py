"""FastAPI server that builds lookup tables from an uploaded GTFS feed."""

from __future__ import annotations

import io
import tempfile
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse

from .errors import GtfsLookupError
from .feed import unpack_feed
from .features import iter_route_line_features, iter_stop_point_features
from .models import Feature, GtfsLookups
from .pipeline import build_lookups

app = FastAPI(title="GTFS Lookup", version="0.1.0")


@app.post("/process")
async def process_feed(
    files: list[UploadFile],
    format: str = Query("json", pattern="^(json|ldgeojson)$"),
):
    """Process an uploaded GTFS zip.

    Returns the route-line lookup tables plus the distance-along table as JSON,
    or the route and stop features as line-delimited GeoJSON.
    """
    if len(files) != 1 or not (files[0].filename or "").lower().endswith(".zip"):
        raise HTTPException(status_code=400, detail="Upload a single GTFS .zip file")

    content = await files[0].read()
    with tempfile.TemporaryDirectory(prefix="gtfs-") as feed_dir:
        try:
            unpack_feed(io.BytesIO(content), feed_dir)
            lookups = build_lookups(feed_dir)
        except GtfsLookupError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        if format == "json":
            return _lookups_to_json(lookups)

        features = list(
            iter_route_line_features(Path(feed_dir) / "routes.txt", lookups.route_trip_shapes, lookups.shapes)
        )
        features += iter_stop_point_features(
            Path(feed_dir) / "stops.txt", lookups.topology, lookups.route_trip_shapes
        )

    return _features_to_ldgeojson_response(features)


def _lookups_to_json(lookups: GtfsLookups) -> dict:
    data = lookups.route_line_lookup().model_dump(mode="json", by_alias=True)
    data["distanceAlongLookup"] = lookups.distance_along
    return data


def _features_to_ldgeojson_response(features: list[Feature]) -> StreamingResponse:
    """Stream features one JSON object per line."""

    def generate():
        for feature in features:
            yield feature.model_dump_json() + "\n"

    return StreamingResponse(
        generate(),
        media_type="application/geo+json-seq",
        headers={"Content-Disposition": "attachment; filename=routelines.ldgeojson"},
    )
