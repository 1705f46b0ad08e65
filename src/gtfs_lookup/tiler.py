"""Run tippecanoe over a line-delimited GeoJSON file."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .errors import TilerError, TilerNotFoundError

log = logging.getLogger(__name__)

TIPPECANOE = "tippecanoe"


def build_tippecanoe_command(
    input_path: str | Path,
    tiles_path: str | Path,
    layer_name: str,
    min_zoom: int = 7,
    simplify_lines: bool = False,
    dont_drop_points: bool = False,
) -> list[str]:
    cmd = [TIPPECANOE, "-e", str(tiles_path), "-l", layer_name, "-P", f"-Z{min_zoom}"]
    if simplify_lines:
        cmd += ["-S", "15"]
    if dont_drop_points:
        cmd += ["-r", "0", "-g", "0"]
    cmd.append(str(input_path))
    return cmd


def run_tippecanoe(
    input_path: str | Path,
    tiles_path: str | Path,
    layer_name: str,
    min_zoom: int = 7,
    simplify_lines: bool = False,
    dont_drop_points: bool = False,
) -> Path:
    """Tile ``input_path`` into a directory of vector tiles at ``tiles_path``.

    Any existing ``tiles_path`` is replaced. Raises ``TilerNotFoundError`` when
    tippecanoe is not on PATH and ``TilerError`` when it exits non-zero.
    """
    if shutil.which(TIPPECANOE) is None:
        raise TilerNotFoundError(f"{TIPPECANOE} is not installed and available on PATH")

    tiles_path = Path(tiles_path)
    if tiles_path.exists():
        shutil.rmtree(tiles_path)

    cmd = build_tippecanoe_command(
        input_path, tiles_path, layer_name, min_zoom, simplify_lines, dont_drop_points
    )
    log.info("Running %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.stdout:
        log.debug(result.stdout)
    if result.returncode != 0:
        log.error("tippecanoe stderr:\n%s", result.stderr)
        raise TilerError(layer_name, result.returncode, result.stderr)
    return tiles_path
