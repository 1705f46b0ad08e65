"""Command line entry point: ``gtfs-lookup build`` and ``gtfs-lookup merge``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import PipelineConfig
from .errors import GtfsLookupError, TilerNotFoundError
from .merge import merge_feeds
from .pipeline import run_from_zip, run_pipeline

log = logging.getLogger("gtfs_lookup")

EXIT_ERROR = 1
EXIT_MISSING_TOOLING = 2


def _build_build_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--feed",
        type=Path,
        help="GTFS .zip or unpacked feed directory (default: $GTFS_ZIP_PATH)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output directory (default: $OUTPUT_DIR_PATH or ./output)",
    )
    parser.add_argument("--tiles", action="store_true", help="Run tippecanoe on the LD-GeoJSON")
    parser.add_argument("--min-zoom", type=int, help="Lowest tile zoom level")
    parser.add_argument(
        "--filter-agency",
        action="append",
        default=[],
        metavar="AGENCY_ID",
        help="Leave this agency out of the service area (repeatable)",
    )
    parser.add_argument(
        "--filter-route",
        action="append",
        default=[],
        metavar="ROUTE_ID",
        help="Leave this route out of the service area (repeatable)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Build the indices one after another instead of in parallel",
    )


def _build_merge_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--feed",
        action="append",
        required=True,
        metavar="PREFIX=PATH",
        help="Unpacked feed directory and the id prefix to give it (repeatable)",
    )
    parser.add_argument("--output", type=Path, required=True, help="Merged feed directory")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gtfs-lookup",
        description="Build route-line lookup tables and map tiles from a GTFS feed",
    )
    parser.add_argument("--log-level", help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)
    _build_build_parser(sub.add_parser("build", help="Build lookup tables from a feed"))
    _build_merge_parser(sub.add_parser("merge", help="Merge unpacked feeds with id prefixes"))
    return parser


def _config_from_args(args: argparse.Namespace) -> PipelineConfig:
    config = PipelineConfig.from_env()
    updates: dict = {}
    if args.feed is not None:
        updates["gtfs_zip_path"] = args.feed
    if args.output is not None:
        updates["output_dir"] = args.output
    if args.tiles:
        updates["build_tiles"] = True
    if args.min_zoom is not None:
        updates["tiles_min_zoom"] = args.min_zoom
    if args.filter_agency:
        updates["filtered_agency_ids"] = config.filtered_agency_ids | set(args.filter_agency)
    if args.filter_route:
        updates["filtered_route_ids"] = config.filtered_route_ids | set(args.filter_route)
    if args.sequential:
        updates["concurrent"] = False
    return config.model_copy(update=updates)


def _parse_feed_specs(specs: list[str]) -> dict[str, Path]:
    feeds: dict[str, Path] = {}
    for spec in specs:
        prefix, sep, path = spec.partition("=")
        if not sep or not prefix or not path:
            raise argparse.ArgumentTypeError(f"Expected PREFIX=PATH, got {spec!r}")
        if prefix in feeds:
            raise argparse.ArgumentTypeError(f"Duplicate feed prefix {prefix!r}")
        feeds[prefix] = Path(path)
    return feeds


def _run_build(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    feed = config.gtfs_zip_path
    if feed is None:
        log.error("No feed given; pass --feed or set GTFS_ZIP_PATH")
        return EXIT_ERROR

    if feed.is_dir():
        result = run_pipeline(feed, config)
    else:
        result = run_from_zip(feed, config)

    log.info(
        "%d shapes, %d routes, %d trips, %d stops -> %d line features, %d point features",
        result.shape_count,
        result.route_count,
        result.trip_count,
        result.stop_count,
        result.line_feature_count,
        result.point_feature_count,
    )
    return 0


def _run_merge(args: argparse.Namespace) -> int:
    output = merge_feeds(_parse_feed_specs(args.feed), args.output)
    log.info("Merged feed written to %s", output)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = args.log_level or PipelineConfig.from_env().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "merge":
            return _run_merge(args)
        return _run_build(args)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except TilerNotFoundError as exc:
        log.error("%s", exc)
        return EXIT_MISSING_TOOLING
    except GtfsLookupError as exc:
        log.error("%s", exc)
        return EXIT_ERROR
    return 0


if __name__ == "__main__":
    sys.exit(main())
