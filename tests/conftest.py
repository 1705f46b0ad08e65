import io
import zipfile
from pathlib import Path
from textwrap import dedent

import pytest

SAMPLE_FEED = {
    "routes.txt": """\
        route_id,agency_id,route_short_name,route_color,route_text_color
        R1,A1,1,FF0000,FFFFFF
        R2,A2,2,,
        R3,A1,3,00FF00,000000
        """,
    # column order differs from the GTFS reference on purpose
    "trips.txt": """\
        trip_id,route_id,service_id,shape_id
        T1,R1,WK,S1
        T2,R1,WK,S1
        T3,R1,WK,S2
        T4,R2,WK,S2
        T5,R3,WK,MISSING
        """,
    "shapes.txt": """\
        shape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence
        S1,37.0,-122.0,1
        S1,37.1,-122.1,2
        S2,37.2,-122.2,1
        S2,37.3,-122.3,2
        """,
    "stops.txt": """\
        stop_id,stop_name,stop_lat,stop_lon
        P1,First,37.0,-122.0
        P2,Second,37.1,-122.1
        P3,Third,37.3,-122.3
        P4,Bad,abc,-122.0
        """,
    "stop_times.txt": """\
        trip_id,arrival_time,departure_time,stop_id,stop_sequence,shape_dist_traveled
        T1,08:00:00,08:00:00,P1,1,0
        T1,08:05:00,08:05:00,P2,2,120.5
        T2,09:00:00,09:00:00,P1,1,0
        T2,09:05:00,09:05:00,P2,2,120.5
        T3,10:00:00,10:00:00,P2,1,
        T3,10:05:00,10:05:00,P3,2,300
        T4,11:00:00,11:00:00,P3,1,0
        T5,12:00:00,12:00:00,P1,1,0
        """,
}


def write_csv(path: Path, text: str) -> Path:
    path.write_text(dedent(text), encoding="utf-8")
    return path


def write_feed(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        write_csv(directory / name, text)
    return directory


def zip_feed(files: dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, text in files.items():
            zf.writestr(name, dedent(text))
    return buf.getvalue()


@pytest.fixture
def feed_dir(tmp_path):
    return write_feed(tmp_path / "feed", SAMPLE_FEED)


@pytest.fixture
def feed_zip(tmp_path):
    path = tmp_path / "gtfs.zip"
    path.write_bytes(zip_feed(SAMPLE_FEED))
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GTFS_ZIP_PATH",
        "OUTPUT_DIR_PATH",
        "FILTERED_AGENCY_IDS",
        "MANUALLY_FILTERED_ROUTE_IDS",
        "BUILD_TILES",
        "TILES_MIN_ZOOM",
        "TILES_LAYER_NAME",
        "SERVICE_AREA_BUFFER_MILES",
        "CONCURRENT_BUILD",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
