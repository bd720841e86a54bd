"""
Size Resolver
=============

Turns the output path and the optional size spec of an invocation into a
concrete output geometry: a pixel viewport (with an optional clip rectangle)
for raster outputs, or a paper size / paper format for PDF outputs.
"""

from typing import Any, Optional
import re

from rasterize.config.logging import get_logger
from rasterize.config.settings import get_settings
from rasterize.models.schemas import (
    ClipRect,
    Orientation,
    OutputFormat,
    OutputGeometry,
    PaperFormat,
    PaperSize,
    PixelViewport,
)

logger = get_logger(__name__)

SIZE_SEPARATOR = "*"
PIXEL_SUFFIX = "px"
PAPER_SIZE_MARGIN = "0px"
PAPER_FORMAT_MARGIN = "1cm"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_leading_int(token: str) -> int:
    """
    Parse the leading base-10 integer of a token, ignoring any trailing text.

    "800px" -> 800, " 42 " -> 42, "-5px" -> -5. A token without leading digits
    is coerced to 0 rather than rejected.

    Args:
        token: Size token such as "800px"

    Returns:
        Parsed integer, or 0 when the token has no leading digits
    """
    match = _LEADING_INT.match(token)
    if match is None:
        logger.warning("Size token has no leading digits, using 0", token=token)
        return 0
    return int(match.group(1))


class SizeResolver:
    """Resolves output geometry from an output path and a size spec."""

    def __init__(self, default_width: Optional[int] = None, default_height: Optional[int] = None):
        settings = get_settings()
        self.default_width = (
            default_width if default_width is not None else settings.default_viewport_width
        )
        self.default_height = (
            default_height if default_height is not None else settings.default_viewport_height
        )
        self.logger: Any = logger.bind(component="size_resolver")  # structlog.BoundLoggerBase

    def resolve(self, output: str, size_spec: Optional[str] = None) -> OutputGeometry:
        """
        Resolve the output geometry for one invocation.

        The first matching rule wins:

        1. PDF output with a size spec: "W*H" gives an explicit paper size,
           anything else is taken as a paper format name.
        2. Size spec ending in "px": "Wpx*Hpx" gives a clipped viewport,
           a single "Wpx" gives a 4:3 viewport captured as a full page.
        3. Otherwise the default viewport.

        Args:
            output: Output file path
            size_spec: Optional size spec from the command line

        Returns:
            Exactly one geometry variant
        """
        if size_spec is not None and OutputFormat.from_path(output) is OutputFormat.PDF:
            return self._resolve_paper(size_spec)

        if size_spec is not None and size_spec[-2:] == PIXEL_SUFFIX:
            return self._resolve_pixels(size_spec)

        return PixelViewport(width=self.default_width, height=self.default_height)

    def _resolve_paper(self, size_spec: str) -> OutputGeometry:
        parts = size_spec.split(SIZE_SEPARATOR)
        if len(parts) == 2:
            return PaperSize(width=parts[0], height=parts[1], margin=PAPER_SIZE_MARGIN)

        return PaperFormat(
            name=size_spec, orientation=Orientation.PORTRAIT, margin=PAPER_FORMAT_MARGIN
        )

    def _resolve_pixels(self, size_spec: str) -> OutputGeometry:
        parts = size_spec.split(SIZE_SEPARATOR)
        if len(parts) == 2:
            width = parse_leading_int(parts[0])
            height = parse_leading_int(parts[1])
            return PixelViewport(
                width=width,
                height=height,
                clip=ClipRect(top=0, left=0, width=width, height=height),
            )

        # Width only: assume a 4:3 window and capture the entire page
        self.logger.debug("Single pixel size", size=size_spec)
        width = parse_leading_int(size_spec)
        height = width * 3 // 4
        self.logger.debug("Derived page height", page_height=height)
        return PixelViewport(width=width, height=height)


def resolve_geometry(output: str, size_spec: Optional[str] = None) -> OutputGeometry:
    """
    Resolve output geometry using the configured default viewport.

    Args:
        output: Output file path
        size_spec: Optional size spec

    Returns:
        Resolved output geometry
    """
    return SizeResolver().resolve(output, size_spec)
