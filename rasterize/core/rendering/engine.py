"""
Rendering Engine
================

Adapter between the orchestrator and the browser. `RenderEngine` holds the
page configuration (viewport, clip, paper, zoom) the orchestrator sets up;
`PlaywrightEngine` loads pages and writes PNG/JPEG/PDF artifacts with
Playwright's Chromium.
"""

from typing import Optional, Dict, Any
from abc import ABC, abstractmethod
from pathlib import Path

from playwright.async_api import async_playwright, Browser, Page, Playwright
from playwright.async_api import Error as PlaywrightError

from rasterize.config.logging import get_logger
from rasterize.config.settings import get_settings
from rasterize.core.errors import CaptureError, EngineError, NavigationError
from rasterize.models.schemas import (
    CaptureResult,
    ClipRect,
    LoadStatus,
    Orientation,
    OutputFormat,
    OutputGeometry,
    PaperFormat,
    PaperSize,
    PixelViewport,
)

logger = get_logger(__name__)


class RenderEngine(ABC):
    """Capability surface the orchestrator drives."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.viewport: Dict[str, int] = {
            "width": self.settings.default_viewport_width,
            "height": self.settings.default_viewport_height,
        }
        self.clip: Optional[ClipRect] = None
        self.paper: Optional[Dict[str, Any]] = None
        self.zoom: Optional[float] = None

    def set_viewport(self, width: int, height: int) -> None:
        self.viewport = {"width": width, "height": height}

    def set_clip(self, clip: Optional[ClipRect]) -> None:
        self.clip = clip

    def set_paper_size(self, width: str, height: str, margin: str) -> None:
        self.paper = {"width": width, "height": height, "margin": margin}

    def set_paper_format(self, name: str, orientation: Orientation, margin: str) -> None:
        self.paper = {
            "format": name,
            "landscape": orientation is Orientation.LANDSCAPE,
            "margin": margin,
        }

    def set_zoom(self, zoom: str) -> None:
        """Set the page zoom factor from its command-line string."""
        try:
            self.zoom = float(zoom)
        except ValueError:
            logger.warning("Ignoring non-numeric zoom factor", zoom=zoom)
            self.zoom = None

    def configure(self, geometry: OutputGeometry) -> None:
        """Apply a resolved geometry to the engine."""
        if isinstance(geometry, PixelViewport):
            self.set_viewport(geometry.width, geometry.height)
            self.set_clip(geometry.clip)
        elif isinstance(geometry, PaperSize):
            self.set_paper_size(geometry.width, geometry.height, geometry.margin)
        elif isinstance(geometry, PaperFormat):
            self.set_paper_format(geometry.name, geometry.orientation, geometry.margin)
        else:
            raise EngineError(f"Unsupported geometry: {geometry!r}")

    @abstractmethod
    async def initialize(self) -> None:
        """Start the engine."""

    @abstractmethod
    async def close(self) -> None:
        """Release every engine resource."""

    @abstractmethod
    async def open(self, address: str) -> LoadStatus:
        """Navigate to an address and report how the load completed."""

    @abstractmethod
    async def capture(self, output: str, output_format: OutputFormat) -> CaptureResult:
        """Write the current frame to a file."""


class PlaywrightEngine(RenderEngine):
    """Playwright-based rendering engine."""

    def __init__(self) -> None:
        super().__init__()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None
        self.logger: Any = logger.bind(engine="playwright")  # structlog.BoundLoggerBase

    async def initialize(self) -> None:
        """Launch the browser."""
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.playwright_headless,
                args=self.settings.browser_args,
            )
            self.logger.info("Browser launched", headless=self.settings.playwright_headless)
        except Exception as e:
            self.logger.error("Failed to launch browser", error=str(e))
            raise EngineError(f"Browser launch failed: {e}") from e

    async def close(self) -> None:
        """Close the page, the browser and Playwright."""
        if self._page:
            await self._page.close()
            self._page = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        self.logger.info("Browser closed")

    async def open(self, address: str) -> LoadStatus:
        """
        Load an address in a fresh page.

        Args:
            address: URL to load

        Returns:
            LoadStatus.SUCCESS once the load event fired, LoadStatus.FAIL otherwise

        Raises:
            NavigationError: If no page could be created for the navigation
        """
        if not self._browser:
            raise NavigationError("Engine not initialized")

        try:
            self._page = await self._browser.new_page(viewport=self.viewport)  # type: ignore[arg-type]
        except PlaywrightError as e:
            raise NavigationError(f"Unable to create page: {e}") from e

        self.logger.info("Navigating", address=address, viewport=self.viewport)

        try:
            await self._page.goto(
                address, wait_until="load", timeout=self.settings.navigation_timeout_ms
            )

            if self.zoom is not None:
                await self._page.evaluate(
                    "zoom => { document.documentElement.style.zoom = String(zoom); }",
                    self.zoom,
                )
        except PlaywrightError as e:
            self.logger.warning("Navigation failed", address=address, error=str(e))
            return LoadStatus.FAIL

        return LoadStatus.SUCCESS

    async def capture(self, output: str, output_format: OutputFormat) -> CaptureResult:
        """
        Write the current page to the output path.

        Args:
            output: Output file path
            output_format: Artifact format

        Returns:
            CaptureResult describing the written file

        Raises:
            CaptureError: If nothing could be written
        """
        if not self._page:
            raise CaptureError("No page loaded")

        try:
            if output_format is OutputFormat.PDF:
                await self._page.pdf(**self._pdf_options(output))
            else:
                await self._page.screenshot(**self._screenshot_options(output, output_format))

            file_size = Path(output).stat().st_size
        except (PlaywrightError, OSError) as e:
            self.logger.error("Capture failed", output=output, error=str(e))
            raise CaptureError(f"Unable to write {output}: {e}") from e

        result = CaptureResult(
            path=output,
            output_format=output_format,
            file_size=file_size,
            metadata={
                "viewport": dict(self.viewport),
                "clipped": self.clip is not None,
                "paper": dict(self.paper) if self.paper else None,
                "zoom": self.zoom,
            },
        )

        self.logger.info(
            "Capture completed", output=output, format=output_format.value, file_size=file_size
        )
        return result

    def _pdf_options(self, output: str) -> Dict[str, Any]:
        """Build page.pdf() keyword arguments from the paper configuration."""
        pdf_options: Dict[str, Any] = {"path": output, "print_background": True}

        if self.paper:
            margin = self.paper["margin"]
            pdf_options["margin"] = {
                "top": margin,
                "right": margin,
                "bottom": margin,
                "left": margin,
            }
            for key in ("format", "landscape", "width", "height"):
                if key in self.paper:
                    pdf_options[key] = self.paper[key]

        return pdf_options

    def _screenshot_options(self, output: str, output_format: OutputFormat) -> Dict[str, Any]:
        """Build page.screenshot() keyword arguments from the clip configuration."""
        screenshot_options: Dict[str, Any] = {
            "path": output,
            "type": "jpeg" if output_format is OutputFormat.JPEG else "png",
        }

        if self.clip:
            screenshot_options["clip"] = {
                "x": self.clip.left,
                "y": self.clip.top,
                "width": self.clip.width,
                "height": self.clip.height,
            }
        else:
            screenshot_options["full_page"] = True

        return screenshot_options
