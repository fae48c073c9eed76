class SvgsmithError(Exception):
    """Base class for errors surfaced to the caller of the pipeline."""

    def __init__(self, reason: str, elapsed_ms: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.elapsed_ms = elapsed_ms

    def __str__(self) -> str:
        if self.elapsed_ms is None:
            return self.reason
        return f"{self.reason} (after {self.elapsed_ms}ms)"


class UnsupportedFormat(SvgsmithError):
    """The input is neither a supported raster image nor an SVG document."""


class UnsupportedMode(SvgsmithError, ValueError):
    """The requested output mode is not one of the known modes."""


class VectorizationFailure(SvgsmithError):
    """The tracer failed or did not finish in time."""
