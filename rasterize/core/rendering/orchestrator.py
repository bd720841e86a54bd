"""
Render Orchestrator
===================

Drives one render session through its lifecycle:

    idle -> navigating -> settling -> capturing -> succeeded
                 |                        |
                 +-------> failed <-------+

Navigation is attempted exactly once. After a successful load a fixed settle
delay lets script-driven layout finish before the single capture. The result
of the run is the process exit code.
"""

from typing import Any, Dict, FrozenSet, Optional
import asyncio

from rasterize.config.logging import get_logger
from rasterize.config.settings import get_settings
from rasterize.core.errors import CaptureError, NavigationError, SessionTransitionError
from rasterize.core.rendering.engine import RenderEngine
from rasterize.models.schemas import LoadStatus, RenderSession, SessionState

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

NAVIGATION_FAILED_MESSAGE = "Unable to load the address!"

TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.NAVIGATING}),
    SessionState.NAVIGATING: frozenset({SessionState.SETTLING, SessionState.FAILED}),
    SessionState.SETTLING: frozenset({SessionState.CAPTURING}),
    SessionState.CAPTURING: frozenset({SessionState.SUCCEEDED, SessionState.FAILED}),
    SessionState.SUCCEEDED: frozenset(),
    SessionState.FAILED: frozenset(),
}


def transition(session: RenderSession, target: SessionState) -> None:
    """
    Move a session to a new state.

    Raises:
        SessionTransitionError: If the move is not allowed from the current state
    """
    if target not in TRANSITIONS[session.state]:
        raise SessionTransitionError(
            f"Illegal transition {session.state.value} -> {target.value}"
        )
    session.state = target
    session.completed = target.is_terminal


class RenderOrchestrator:
    """Sequences navigation, the settle delay and capture for one session."""

    def __init__(self, engine: RenderEngine, settle_delay_ms: Optional[int] = None):
        self.engine = engine
        self.settle_delay_ms = (
            settle_delay_ms if settle_delay_ms is not None else get_settings().settle_delay_ms
        )
        self.logger: Any = logger.bind(component="orchestrator")  # structlog.BoundLoggerBase

    async def run(self, session: RenderSession) -> int:
        """
        Run a session to completion.

        Args:
            session: Idle render session

        Returns:
            Process exit code: 0 on success, 1 on navigation or capture failure
        """
        self.engine.configure(session.geometry)
        if session.zoom is not None:
            self.engine.set_zoom(session.zoom)

        transition(session, SessionState.NAVIGATING)
        self.logger.info("Opening address", address=session.address)

        try:
            status = await self.engine.open(session.address)
        except NavigationError as e:
            self.logger.error("Navigation could not start", error=str(e))
            status = LoadStatus.FAIL

        if status is not LoadStatus.SUCCESS:
            return self._fail(session, NAVIGATION_FAILED_MESSAGE)

        transition(session, SessionState.SETTLING)
        await asyncio.sleep(self.settle_delay_ms / 1000)

        transition(session, SessionState.CAPTURING)
        try:
            result = await self.engine.capture(session.output, session.output_format)
        except CaptureError as e:
            return self._fail(session, str(e))

        transition(session, SessionState.SUCCEEDED)
        self.logger.info("Render completed", output=result.path, file_size=result.file_size)
        return EXIT_SUCCESS

    def _fail(self, session: RenderSession, message: str) -> int:
        transition(session, SessionState.FAILED)
        session.error = message
        self.logger.error("Render failed", address=session.address, error=message)
        print(message)
        return EXIT_FAILURE
