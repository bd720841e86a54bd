"""
Test Configuration
==================

Pytest configuration with settings overrides, fake engines and sample sessions.
"""

from typing import Generator, List
from unittest.mock import AsyncMock, patch

import pytest
from pydantic_settings import SettingsConfigDict

from rasterize.config import settings as settings_module
from rasterize.config.settings import Settings
from rasterize.models.schemas import (
    ClipRect,
    OutputFormat,
    PixelViewport,
    RenderSession,
)
from tests.utils.mocks import FakeEngine


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"
    default_viewport_width: int = 600
    default_viewport_height: int = 600
    settle_delay_ms: int = 200
    navigation_timeout_ms: int = 0

    model_config = SettingsConfigDict(env_file=".env.test")


@pytest.fixture
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(autouse=True)
def override_settings(test_settings: TestSettings, monkeypatch) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    monkeypatch.setattr(settings_module, "settings", test_settings)
    yield test_settings


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Engine fake that loads successfully and records calls."""
    return FakeEngine()


@pytest.fixture
def sleep_calls(fake_engine: FakeEngine) -> Generator[List[float], None, None]:
    """Patch the settle delay, recording each delay in seconds."""
    delays: List[float] = []

    async def record_sleep(seconds: float) -> None:
        delays.append(seconds)
        fake_engine.calls.append("sleep")

    with patch(
        "rasterize.core.rendering.orchestrator.asyncio.sleep",
        new=AsyncMock(side_effect=record_sleep),
    ):
        yield delays


@pytest.fixture
def png_session() -> RenderSession:
    """Idle session capturing an 800x600 clip to a PNG."""
    return RenderSession(
        address="https://example.com",
        output="out.png",
        output_format=OutputFormat.PNG,
        geometry=PixelViewport(
            width=800, height=600, clip=ClipRect(top=0, left=0, width=800, height=600)
        ),
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file paths."""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
