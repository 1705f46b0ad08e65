"""Tests for the persisted JSON lookup files."""

import json

import pytest

from gtfs_lookup import (
    build_lookups,
    read_route_line_lookup,
    write_distance_along_lookup,
    write_route_line_lookup,
)
from gtfs_lookup.lookups import atomic_writer


class TestRouteLineLookup:
    def test_document_keys(self, feed_dir, tmp_path):
        lookups = build_lookups(feed_dir)
        path = write_route_line_lookup(lookups.route_line_lookup(), tmp_path)
        data = json.loads(path.read_text())
        assert set(data) == {"stopTripShapeLookup", "shapeIdLineStringLookup", "tripIdStopIdsLookup"}
        assert data["stopTripShapeLookup"]["R1"] == {"T1": "S1", "T2": "S1", "T3": "S2"}
        assert data["shapeIdLineStringLookup"]["S2"] == [[-122.2, 37.2], [-122.3, 37.3]]
        assert data["tripIdStopIdsLookup"]["T3"] == ["P2", "P3"]

    def test_round_trip(self, feed_dir, tmp_path):
        lookup = build_lookups(feed_dir).route_line_lookup()
        path = write_route_line_lookup(lookup, tmp_path)
        assert read_route_line_lookup(path) == lookup

    def test_numeric_looking_ids_stay_strings(self, tmp_path):
        from gtfs_lookup import RouteLineLookup

        lookup = RouteLineLookup(
            stop_trip_shape_lookup={"10": {"001": "7"}},
            shape_id_line_string_lookup={"7": [(1.0, 2.0)]},
            trip_id_stop_ids_lookup={"001": ["0042"]},
        )
        path = write_route_line_lookup(lookup, tmp_path)
        data = json.loads(path.read_text())
        assert data["stopTripShapeLookup"] == {"10": {"001": "7"}}
        assert data["tripIdStopIdsLookup"] == {"001": ["0042"]}


class TestDistanceAlongLookup:
    def test_flat_table(self, feed_dir, tmp_path):
        lookups = build_lookups(feed_dir)
        path = write_distance_along_lookup(lookups.distance_along, tmp_path)
        data = json.loads(path.read_text())
        assert data["P2|T1"] == 120.5
        assert all(isinstance(v, float) for v in data.values())

    def test_rejects_nan(self, tmp_path):
        with pytest.raises(ValueError):
            write_distance_along_lookup({"S1|T1": float("nan")}, tmp_path)
        assert list(tmp_path.iterdir()) == []


class TestAtomicWriter:
    def test_replaces_on_success(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_text("old")
        with atomic_writer(path) as f:
            f.write("new")
        assert path.read_text() == "new"
        assert list(tmp_path.iterdir()) == [path]

    def test_leaves_nothing_on_failure(self, tmp_path):
        path = tmp_path / "out.json"
        with pytest.raises(RuntimeError):
            with atomic_writer(path) as f:
                f.write("partial")
                raise RuntimeError("boom")
        assert list(tmp_path.iterdir()) == []

    def test_keeps_previous_file_on_failure(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_text("previous")
        with pytest.raises(RuntimeError):
            with atomic_writer(path) as f:
                f.write("partial")
                raise RuntimeError("boom")
        assert path.read_text() == "previous"
