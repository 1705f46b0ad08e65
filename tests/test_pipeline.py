"""Tests for the end-to-end pipeline."""

import json
import subprocess

import pytest

from gtfs_lookup import (
    MissingFeedFileError,
    PipelineConfig,
    TilerError,
    TilerNotFoundError,
    build_lookups,
    run_from_zip,
    run_pipeline,
)


@pytest.fixture
def fake_tippecanoe(monkeypatch):
    calls = []

    def fake_run(cmd, capture_output, text):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr("gtfs_lookup.tiler.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("gtfs_lookup.tiler.subprocess.run", fake_run)
    return calls


class TestBuildLookups:
    def test_concurrent_matches_sequential(self, feed_dir):
        assert build_lookups(feed_dir, concurrent=True) == build_lookups(feed_dir, concurrent=False)

    def test_missing_required_file(self, feed_dir):
        (feed_dir / "shapes.txt").unlink()
        with pytest.raises(MissingFeedFileError) as exc_info:
            build_lookups(feed_dir)
        assert exc_info.value.filename == "shapes.txt"

    def test_lookup_document_shares_built_indices(self, feed_dir):
        lookups = build_lookups(feed_dir)
        doc = lookups.route_line_lookup()
        assert doc.shape_id_line_string_lookup is lookups.shapes
        assert doc.stop_trip_shape_lookup is lookups.route_trip_shapes.routes
        assert doc.trip_id_stop_ids_lookup is lookups.topology.trip_stop_ids


class TestRunPipeline:
    def test_writes_all_outputs(self, feed_dir, tmp_path):
        config = PipelineConfig(output_dir=tmp_path / "out")
        result = run_pipeline(feed_dir, config)

        assert result.route_line_lookup_path.name == "route-line-lookup.json"
        assert result.distance_along_lookup_path.name == "distance-along-lookup.json"
        assert result.ldgeojson_path.exists()
        assert result.service_area_path is not None and result.service_area_path.exists()
        assert result.tiles_path is None
        assert result.line_feature_count == 3
        assert result.point_feature_count == 3
        assert result.shape_count == 2
        assert result.route_count == 3

        lines = result.ldgeojson_path.read_text().splitlines()
        types = [json.loads(line)["geometry"]["type"] for line in lines]
        assert types == ["LineString"] * 3 + ["Point"] * 3

    def test_shape_missing_from_shapes_does_not_abort(self, feed_dir, tmp_path):
        result = run_pipeline(feed_dir, PipelineConfig(output_dir=tmp_path / "out"))
        records = [json.loads(line) for line in result.ldgeojson_path.read_text().splitlines()]
        line_routes = {r["properties"]["route_id"] for r in records if r["geometry"]["type"] == "LineString"}
        assert "R3" not in line_routes

    def test_idempotent(self, feed_dir, tmp_path):
        first = run_pipeline(feed_dir, PipelineConfig(output_dir=tmp_path / "a"))
        second = run_pipeline(feed_dir, PipelineConfig(output_dir=tmp_path / "b", concurrent=False))
        for attr in ("route_line_lookup_path", "distance_along_lookup_path", "ldgeojson_path"):
            assert getattr(first, attr).read_bytes() == getattr(second, attr).read_bytes()

    def test_missing_file_writes_nothing(self, feed_dir, tmp_path):
        (feed_dir / "stop_times.txt").unlink()
        out = tmp_path / "out"
        with pytest.raises(MissingFeedFileError):
            run_pipeline(feed_dir, PipelineConfig(output_dir=out))
        assert not out.exists()

    def test_service_area_skipped_when_everything_filtered(self, feed_dir, tmp_path):
        config = PipelineConfig(output_dir=tmp_path / "out", filtered_agency_ids={"A1", "A2"})
        result = run_pipeline(feed_dir, config)
        assert result.service_area_path is None
        assert not (tmp_path / "out" / "transit-service-area.json").exists()

    def test_builds_tiles(self, feed_dir, tmp_path, fake_tippecanoe):
        config = PipelineConfig(output_dir=tmp_path / "out", build_tiles=True, tiles_min_zoom=9)
        result = run_pipeline(feed_dir, config)
        assert result.tiles_path == tmp_path / "out" / "route-tiles"
        (cmd,) = fake_tippecanoe
        assert cmd[0] == "tippecanoe"
        assert "-Z9" in cmd
        assert cmd[-1] == str(result.ldgeojson_path)

    def test_missing_tiler(self, feed_dir, tmp_path, monkeypatch):
        monkeypatch.setattr("gtfs_lookup.tiler.shutil.which", lambda name: None)
        with pytest.raises(TilerNotFoundError):
            run_pipeline(feed_dir, PipelineConfig(output_dir=tmp_path / "out", build_tiles=True))

    def test_tiler_failure(self, feed_dir, tmp_path, monkeypatch):
        monkeypatch.setattr("gtfs_lookup.tiler.shutil.which", lambda name: f"/usr/bin/{name}")
        monkeypatch.setattr(
            "gtfs_lookup.tiler.subprocess.run",
            lambda cmd, capture_output, text: subprocess.CompletedProcess(cmd, 1, "", "bad input"),
        )
        with pytest.raises(TilerError) as exc_info:
            run_pipeline(feed_dir, PipelineConfig(output_dir=tmp_path / "out", build_tiles=True))
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "bad input"


class TestRunFromZip:
    def test_unpacks_and_runs(self, feed_zip, tmp_path):
        result = run_from_zip(feed_zip, PipelineConfig(output_dir=tmp_path / "out"))
        assert result.line_feature_count == 3
        data = json.loads(result.route_line_lookup_path.read_text())
        assert data["tripIdStopIdsLookup"]["T1"] == ["P1", "P2"]
