"""
Unit Tests for Playwright Engine
================================

Unit tests for browser lifecycle, navigation and capture against mocked Playwright objects.
"""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, patch

from playwright.async_api import Error as PlaywrightError

from rasterize.core.errors import CaptureError, EngineError, NavigationError
from rasterize.core.rendering.engine import PlaywrightEngine
from rasterize.models.schemas import (
    ClipRect, LoadStatus, OutputFormat, PaperFormat, PaperSize, PixelViewport
)

from tests.utils.mocks import build_playwright_mocks


def write_file(content: bytes = b"data"):
    """Side effect writing content to the `path` keyword, like Playwright does."""

    async def _write(**kwargs):
        with open(kwargs["path"], "wb") as f:
            f.write(content)
        return content

    return _write


@pytest.fixture
def playwright_mocks():
    """Patch async_playwright with a mocked object graph."""
    mocks = build_playwright_mocks()
    with patch("rasterize.core.rendering.engine.async_playwright", mocks[0]):
        yield mocks


@pytest_asyncio.fixture
async def engine(playwright_mocks):
    """Initialized engine on mocked Playwright."""
    engine = PlaywrightEngine()
    await engine.initialize()
    return engine


class TestLifecycle:
    """Test engine start-up and shutdown."""

    @pytest.mark.asyncio
    async def test_initialize_launches_chromium(self, playwright_mocks, override_settings):
        """Test Chromium is launched with the configured flags."""
        _, mock_playwright, mock_browser, _ = playwright_mocks
        engine = PlaywrightEngine()

        await engine.initialize()

        mock_playwright.chromium.launch.assert_awaited_once_with(
            headless=True, args=override_settings.browser_args
        )
        assert engine._browser is mock_browser

    @pytest.mark.asyncio
    async def test_initialize_failure_raises_engine_error(self):
        """Test launch problems surface as EngineError."""
        with patch("rasterize.core.rendering.engine.async_playwright") as mock_async_playwright:
            mock_async_playwright.return_value.start = AsyncMock(
                side_effect=Exception("Executable doesn't exist")
            )

            with pytest.raises(EngineError, match="Browser launch failed"):
                await PlaywrightEngine().initialize()

    @pytest.mark.asyncio
    async def test_close_releases_everything(self, engine, playwright_mocks):
        """Test close shuts down page, browser and Playwright."""
        _, mock_playwright, mock_browser, mock_page = playwright_mocks
        await engine.open("https://example.com")

        await engine.close()

        mock_page.close.assert_awaited_once()
        mock_browser.close.assert_awaited_once()
        mock_playwright.stop.assert_awaited_once()
        assert engine._browser is None

    @pytest.mark.asyncio
    async def test_close_without_initialize(self):
        """Test closing an engine that never started is a no-op."""
        await PlaywrightEngine().close()


class TestOpen:
    """Test navigation."""

    @pytest.mark.asyncio
    async def test_open_success(self, engine, playwright_mocks):
        """Test a completed load reports success with the configured viewport."""
        _, _, mock_browser, mock_page = playwright_mocks
        engine.configure(PixelViewport(width=1920, height=1440))

        status = await engine.open("https://example.com")

        assert status is LoadStatus.SUCCESS
        mock_browser.new_page.assert_awaited_once_with(viewport={"width": 1920, "height": 1440})
        mock_page.goto.assert_awaited_once_with(
            "https://example.com", wait_until="load", timeout=0
        )
        mock_page.evaluate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_open_failure(self, engine, playwright_mocks):
        """Test a navigation error reports fail instead of raising."""
        mock_page = playwright_mocks[3]
        mock_page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        status = await engine.open("https://nowhere.invalid")

        assert status is LoadStatus.FAIL

    @pytest.mark.asyncio
    async def test_open_uses_navigation_timeout(self, engine, playwright_mocks, override_settings):
        override_settings.navigation_timeout_ms = 5000

        await engine.open("https://example.com")

        playwright_mocks[3].goto.assert_awaited_once_with(
            "https://example.com", wait_until="load", timeout=5000
        )

    @pytest.mark.asyncio
    async def test_open_applies_zoom(self, engine, playwright_mocks):
        """Test the zoom factor is applied to the loaded document."""
        engine.set_zoom("0.5")

        await engine.open("https://example.com")

        args = playwright_mocks[3].evaluate.await_args.args
        assert "zoom" in args[0]
        assert args[1] == 0.5

    @pytest.mark.asyncio
    async def test_open_before_initialize(self):
        """Test navigating without a browser is a navigation error."""
        with pytest.raises(NavigationError, match="not initialized"):
            await PlaywrightEngine().open("https://example.com")

    @pytest.mark.asyncio
    async def test_page_creation_failure(self, engine, playwright_mocks):
        playwright_mocks[2].new_page.side_effect = PlaywrightError("Target closed")

        with pytest.raises(NavigationError, match="Unable to create page"):
            await engine.open("https://example.com")


class TestCapture:
    """Test artifact capture."""

    @pytest.mark.asyncio
    async def test_clipped_png(self, engine, playwright_mocks, tmp_path):
        """Test a clipped viewport screenshots exactly the clip rectangle."""
        mock_page = playwright_mocks[3]
        mock_page.screenshot.side_effect = write_file(b"png-bytes")
        output = str(tmp_path / "out.png")
        engine.configure(PixelViewport(
            width=800, height=600, clip=ClipRect(width=800, height=600)
        ))
        await engine.open("https://example.com")

        result = await engine.capture(output, OutputFormat.PNG)

        mock_page.screenshot.assert_awaited_once_with(
            path=output, type="png", clip={"x": 0, "y": 0, "width": 800, "height": 600}
        )
        assert result.path == output
        assert result.file_size == len(b"png-bytes")
        assert result.metadata["clipped"] is True

    @pytest.mark.asyncio
    async def test_unclipped_jpeg_is_full_page(self, engine, playwright_mocks, tmp_path):
        """Test no clip captures the entire page."""
        mock_page = playwright_mocks[3]
        mock_page.screenshot.side_effect = write_file()
        output = str(tmp_path / "out.jpg")
        await engine.open("https://example.com")

        result = await engine.capture(output, OutputFormat.JPEG)

        mock_page.screenshot.assert_awaited_once_with(path=output, type="jpeg", full_page=True)
        assert result.output_format is OutputFormat.JPEG

    @pytest.mark.asyncio
    async def test_pdf_paper_size(self, engine, playwright_mocks, tmp_path):
        """Test explicit paper dimensions and margins reach page.pdf()."""
        mock_page = playwright_mocks[3]
        mock_page.pdf.side_effect = write_file(b"%PDF")
        output = str(tmp_path / "a.pdf")
        engine.configure(PaperSize(width="5in", height="7.5in", margin="0px"))
        await engine.open("https://example.com")

        await engine.capture(output, OutputFormat.PDF)

        margin = {"top": "0px", "right": "0px", "bottom": "0px", "left": "0px"}
        mock_page.pdf.assert_awaited_once_with(
            path=output, print_background=True, margin=margin, width="5in", height="7.5in"
        )

    @pytest.mark.asyncio
    async def test_pdf_paper_format(self, engine, playwright_mocks, tmp_path):
        """Test a named format is passed with its orientation."""
        mock_page = playwright_mocks[3]
        mock_page.pdf.side_effect = write_file(b"%PDF")
        output = str(tmp_path / "a.pdf")
        engine.configure(PaperFormat(name="Letter"))
        await engine.open("https://example.com")

        await engine.capture(output, OutputFormat.PDF)

        kwargs = mock_page.pdf.await_args.kwargs
        assert kwargs["format"] == "Letter"
        assert kwargs["landscape"] is False
        assert kwargs["margin"]["top"] == "1cm"
        assert "width" not in kwargs

    @pytest.mark.asyncio
    async def test_pdf_without_paper_uses_engine_defaults(self, engine, playwright_mocks, tmp_path):
        mock_page = playwright_mocks[3]
        mock_page.pdf.side_effect = write_file(b"%PDF")
        output = str(tmp_path / "a.pdf")
        await engine.open("https://example.com")

        await engine.capture(output, OutputFormat.PDF)

        mock_page.pdf.assert_awaited_once_with(path=output, print_background=True)

    @pytest.mark.asyncio
    async def test_playwright_error_raises_capture_error(self, engine, playwright_mocks, tmp_path):
        """Test write failures are propagated instead of assumed successful."""
        playwright_mocks[3].screenshot.side_effect = PlaywrightError("Permission denied")
        await engine.open("https://example.com")

        with pytest.raises(CaptureError, match="Unable to write"):
            await engine.capture(str(tmp_path / "out.png"), OutputFormat.PNG)

    @pytest.mark.asyncio
    async def test_missing_file_raises_capture_error(self, engine, tmp_path):
        """Test a capture that produced no file is a failure."""
        await engine.open("https://example.com")

        with pytest.raises(CaptureError):
            await engine.capture(str(tmp_path / "missing.png"), OutputFormat.PNG)

    @pytest.mark.asyncio
    async def test_capture_before_open(self, engine, tmp_path):
        with pytest.raises(CaptureError, match="No page loaded"):
            await engine.capture(str(tmp_path / "out.png"), OutputFormat.PNG)
