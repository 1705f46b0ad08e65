"""Unpacking a zipped GTFS feed into a working directory."""

from __future__ import annotations

import logging
import shutil
import zipfile
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from .errors import GtfsLookupError, MissingFeedFileError

log = logging.getLogger(__name__)

REQUIRED_FILES = ("routes.txt", "trips.txt", "stop_times.txt", "stops.txt", "shapes.txt")


def check_feed_dir(feed_dir: str | Path, required: Iterable[str] = REQUIRED_FILES) -> Path:
    """Raise ``MissingFeedFileError`` for the first required file not present in ``feed_dir``."""
    feed_dir = Path(feed_dir)
    for name in required:
        if not (feed_dir / name).is_file():
            raise MissingFeedFileError(name, f"not found in {feed_dir}")
    return feed_dir


def unpack_feed(
    feed: str | Path | BinaryIO,
    dest: str | Path,
    required: Iterable[str] = REQUIRED_FILES,
) -> Path:
    """Extract the ``required`` GTFS files from a zip archive into ``dest``.

    Members are matched by basename, so feeds zipped inside a top-level folder
    work too. Other members are ignored.
    """
    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    wanted = set(required)

    try:
        zf = zipfile.ZipFile(feed)
    except zipfile.BadZipFile as exc:
        raise GtfsLookupError(f"GTFS feed is not a valid zip archive: {exc}") from exc
    except OSError as exc:
        name = Path(feed).name if isinstance(feed, (str, Path)) else "feed archive"
        raise MissingFeedFileError(name, str(exc)) from exc

    with zf:
        for info in zf.infolist():
            if info.is_dir():
                continue
            name = PurePosixPath(info.filename).name
            if name not in wanted:
                continue
            with zf.open(info) as src, open(dest / name, "wb") as dst:
                shutil.copyfileobj(src, dst)
            log.debug("Extracted %s", name)

    return check_feed_dir(dest, wanted)
