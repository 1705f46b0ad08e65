"""Exception types raised by the lookup-table pipeline."""


class GtfsLookupError(Exception):
    """Base class for fatal pipeline errors."""


class MissingFeedFileError(GtfsLookupError):
    """A required GTFS file is absent or cannot be opened."""

    def __init__(self, filename: str, detail: str | None = None):
        self.filename = filename
        message = f"Required GTFS file missing or unreadable: {filename}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class TilerNotFoundError(GtfsLookupError):
    """The tiler binary is not available on PATH."""


class TilerError(GtfsLookupError):
    """The tiler process exited with a non-zero status."""

    def __init__(self, layer_name: str, returncode: int, stderr: str = ""):
        self.layer_name = layer_name
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Tippecanoe failed to tile {layer_name} (exit code {returncode})")
