"""
Command Line Interface
======================

rasterize URL filename [paperwidth*paperheight|paperformat] [zoom]

Loads a page in a headless browser and writes it to a PNG, JPEG or PDF file.
"""

from typing import List, Optional
import asyncio
import sys

from rasterize.config.logging import get_logger
from rasterize.core.errors import EngineError, UsageError
from rasterize.core.rendering.engine import PlaywrightEngine, RenderEngine
from rasterize.core.rendering.orchestrator import EXIT_FAILURE, RenderOrchestrator
from rasterize.core.sizing.resolver import resolve_geometry
from rasterize.models.schemas import InvocationArgs, RenderSession

logger = get_logger(__name__)

USAGE = """\
Usage: rasterize URL filename [paperwidth*paperheight|paperformat] [zoom]
  paper (pdf output) examples: "5in*7.5in", "10cm*20cm", "A4", "Letter"
  image (png/jpg output) examples: "1920px" entire page, window width 1920px
                                   "800px*600px" window, clipped to 800x600"""

FIELDS = ("address", "output", "size_spec", "zoom")
MIN_ARGS = 2


def parse_args(argv: List[str]) -> InvocationArgs:
    """
    Map positional tokens onto invocation arguments.

    Tokens are taken verbatim by position; a leading "-" or a literal "--" is
    an ordinary value, so malformed sizes such as "-5px" reach the resolver.

    Raises:
        UsageError: If fewer than 2 or more than 4 tokens are given
    """
    if not MIN_ARGS <= len(argv) <= len(FIELDS):
        raise UsageError(f"Expected {MIN_ARGS} to {len(FIELDS)} arguments, got {len(argv)}")
    return InvocationArgs(**dict(zip(FIELDS, argv)))


def build_session(args: InvocationArgs) -> RenderSession:
    """Resolve the geometry of an invocation into a fresh render session."""
    return RenderSession(
        address=args.address,
        output=args.output,
        output_format=args.output_format,
        geometry=resolve_geometry(args.output, args.size_spec),
        zoom=args.zoom,
    )


async def render(session: RenderSession, engine: Optional[RenderEngine] = None) -> int:
    """
    Run a session on an engine, closing the engine afterwards.

    Args:
        session: Idle render session
        engine: Engine to use; a PlaywrightEngine when omitted

    Returns:
        Process exit code
    """
    engine = engine or PlaywrightEngine()
    try:
        await engine.initialize()
        return await RenderOrchestrator(engine).run(session)
    finally:
        await engine.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Rasterize a page; returns the process exit code."""
    try:
        args = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        logger.debug("Invalid command line", error=str(e))
        print(USAGE)
        return EXIT_FAILURE

    session = build_session(args)
    logger.debug(
        "Session resolved",
        output_format=session.output_format.value,
        geometry=session.geometry.model_dump(),
    )

    try:
        return asyncio.run(render(session))
    except EngineError as e:
        print(f"Unable to start the rendering engine: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
