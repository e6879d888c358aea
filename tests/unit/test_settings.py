"""
Unit Tests for Settings and Logging Configuration
=================================================

Tests for environment-driven settings, validators and the logging config
dictionary.
"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from responsive_images.config import settings as settings_module
from responsive_images.config.logging import get_logger, get_logging_config
from responsive_images.config.settings import Settings, get_settings, reload_settings
from responsive_images.models.schemas import MarkupPolicy, OutputFormat


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of the settings under test."""
    for name in [
        "RESPONSIVE_IMAGES_ENVIRONMENT",
        "RESPONSIVE_IMAGES_LOG_LEVEL",
        "RESPONSIVE_IMAGES_URL_PATH",
        "RESPONSIVE_IMAGES_MARKUP_POLICY",
        "RESPONSIVE_IMAGES_SIZES_OFFSET",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module, "settings", None)


class TestSettingsDefaults:
    """Test default build configuration."""

    def test_output_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.output_format is OutputFormat.JPEG
        assert settings.output_dir == Path("_site/images/")
        assert settings.url_path == "/images/"
        assert settings.quality == 80
        assert settings.overwrite_existing is False

    def test_markup_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.markup_policy is MarkupPolicy.PICTURE
        assert settings.default_link_target == "_self"
        assert settings.sizes_offset == 10


class TestSettingsValidation:
    """Test settings validators."""

    @pytest.mark.parametrize(
        "value,expected",
        [("images", "/images/"), ("/img", "/img/"), ("assets/img/", "/assets/img/"), ("/", "/")],
    )
    def test_url_path_normalized(self, value, expected):
        assert Settings(_env_file=None, url_path=value).url_path == expected

    def test_log_level_upper_cased(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="staging")

    def test_negative_sizes_offset_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, sizes_offset=-1)

    def test_quality_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, quality=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, quality=101)


class TestSettingsEnvironment:
    """Test environment variable overrides."""

    def test_environment_variables_override_defaults(self, monkeypatch):
        monkeypatch.setenv("RESPONSIVE_IMAGES_MARKUP_POLICY", "srcset")
        monkeypatch.setenv("RESPONSIVE_IMAGES_SIZES_OFFSET", "24")
        monkeypatch.setenv("RESPONSIVE_IMAGES_URL_PATH", "media")

        settings = Settings(_env_file=None)

        assert settings.markup_policy is MarkupPolicy.SRCSET
        assert settings.sizes_offset == 24
        assert settings.url_path == "/media/"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_settings_picks_up_changes(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("RESPONSIVE_IMAGES_SIZES_OFFSET", "5")

        reloaded = reload_settings()

        assert reloaded is not first
        assert reloaded.sizes_offset == 5
        assert get_settings() is reloaded


class TestLoggingConfig:
    """Test the stdlib logging configuration dictionary."""

    def test_console_only_without_log_dir(self):
        config = get_logging_config(Settings(_env_file=None))

        assert set(config["handlers"]) == {"console"}
        assert config["loggers"][""]["handlers"] == ["console"]
        assert config["handlers"]["console"]["formatter"] == "standard"

    def test_file_handlers_with_log_dir(self, tmp_path):
        config = get_logging_config(Settings(_env_file=None, log_dir=tmp_path / "logs"))

        assert {"console", "file", "error_file"} == set(config["handlers"])
        assert config["handlers"]["file"]["filename"].endswith("build.log")
        assert config["handlers"]["error_file"]["level"] == "ERROR"

    def test_testing_environment_skips_file_handlers(self, tmp_path):
        settings = Settings(_env_file=None, environment="testing", log_dir=tmp_path / "logs")

        config = get_logging_config(settings)

        assert set(config["handlers"]) == {"console"}

    def test_production_uses_json_formatter(self):
        config = get_logging_config(Settings(_env_file=None, environment="production"))

        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["formatters"]["json"]["()"] == "pythonjsonlogger.json.JsonFormatter"

    def test_pil_logger_is_quiet(self):
        config = get_logging_config(Settings(_env_file=None, log_level="DEBUG"))

        assert config["loggers"]["PIL"]["level"] == "WARNING"

    def test_get_logger_returns_bindable_logger(self):
        logger = get_logger("tests")
        assert logger.bind(component="test") is not None
