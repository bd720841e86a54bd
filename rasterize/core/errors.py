"""
Rasterizer Errors
=================

Exception hierarchy shared by the engine, the orchestrator and the CLI.
"""


class RasterizeError(Exception):
    """Base exception for rasterization failures."""

    pass


class UsageError(RasterizeError):
    """Exception raised when the command line has the wrong shape."""

    pass


class EngineError(RasterizeError):
    """Exception raised when the rendering engine cannot be started or used."""

    pass


class NavigationError(EngineError):
    """Exception raised when the engine cannot begin navigation."""

    pass


class CaptureError(EngineError):
    """Exception raised when the current frame cannot be written to the output."""

    pass


class SessionTransitionError(RasterizeError):
    """Exception raised on an illegal render session state transition."""

    pass
