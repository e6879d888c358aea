"""
Test Configuration
==================

Pytest configuration with fixtures for unit and integration tests.
Provides test settings, generated source images and fake resizers.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from pydantic_settings import SettingsConfigDict

from responsive_images.config.logging import setup_logging
from responsive_images.config.settings import Settings
from responsive_images.core.rendering.renderer import ResponsiveImageRenderer

from tests.utils.helpers import create_test_image
from tests.utils.mocks import RecordingResizer


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"
    output_dir: Path = Path("./test_site/images")

    model_config = SettingsConfigDict(env_file=".env.test")


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure structured logging once for the session."""
    setup_logging(TestSettings())


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory generated variants are written to."""
    return tmp_path / "_site" / "images"


@pytest.fixture
def test_settings(output_dir: Path) -> TestSettings:
    """Test settings writing into a temporary site directory."""
    return TestSettings(output_dir=output_dir)


@pytest.fixture
def override_settings(test_settings: TestSettings):
    """Make the global settings accessor return the test settings."""
    with patch(
        "responsive_images.core.rendering.renderer.get_settings", return_value=test_settings
    ):
        yield test_settings


@pytest.fixture
def source_image(tmp_path: Path) -> Path:
    """A 1600x900 JPEG source image."""
    return create_test_image(tmp_path / "src" / "photo.jpg")


@pytest.fixture
def transparent_image(tmp_path: Path) -> Path:
    """A small RGBA PNG source image."""
    return create_test_image(
        tmp_path / "src" / "logo.png", size=(400, 200), mode="RGBA", image_format="PNG"
    )


@pytest.fixture
def recording_resizer() -> RecordingResizer:
    """Resizer that records calls and returns deterministic variants."""
    return RecordingResizer()


@pytest.fixture
def renderer(test_settings: TestSettings, recording_resizer: RecordingResizer):
    """Renderer with the default picture policy and a recording resizer."""
    return ResponsiveImageRenderer(test_settings, resizer=recording_resizer)


@pytest.fixture
def widths() -> list:
    """Breakpoints used across the markup tests."""
    return [480, 768, 1200]
