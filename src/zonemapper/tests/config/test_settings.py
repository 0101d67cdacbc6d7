import pytest
from pathlib import Path

from zonemapper.config.settings import (
    Settings,
    EncoderSettings,
    DirectorySettings,
    OutputSettings,
    LoggingSettings,
    LogLevel,
    get_settings,
    set_settings,
)
import zonemapper.config.settings as settings_module
from zonemapper.domain.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def reset_global_settings():
    original = settings_module._settings
    settings_module._settings = None
    yield
    settings_module._settings = original


class TestLogLevel:

    def test_log_level_values(self):
        assert LogLevel.DEBUG.value == "DEBUG"
        assert LogLevel.CRITICAL.value == "CRITICAL"


class TestEncoderSettings:
    """Test EncoderSettings dataclass and validation."""

    def test_default_values(self):
        settings = EncoderSettings()
        assert settings.range_threshold == 3
        assert settings.coverage_threshold_percent == 50.0
        assert settings.utsf_version == "3.0"
        assert settings.source_format == "webapp"

    def test_validate_range_threshold(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EncoderSettings(range_threshold=0).validate()
        assert "range_threshold must be at least 1" in str(exc_info.value)
        assert exc_info.value.context.get('config_field') == "encoder.range_threshold"

    @pytest.mark.parametrize("pct", [-0.1, 100.1])
    def test_validate_coverage_threshold(self, pct):
        with pytest.raises(ConfigurationError) as exc_info:
            EncoderSettings(coverage_threshold_percent=pct).validate()
        assert exc_info.value.config_field == "encoder.coverage_threshold_percent"

    def test_validate_version(self):
        with pytest.raises(ConfigurationError):
            EncoderSettings(utsf_version="").validate()

    def test_validate_success(self):
        EncoderSettings(range_threshold=1, coverage_threshold_percent=100.0).validate()


class TestDirectorySettings:

    def test_default_values(self):
        settings = DirectorySettings()
        assert settings.source is None
        assert settings.use_cache is True
        assert settings.fresh_cache is False
        assert settings.timeout_seconds == 30.0

    def test_validate_timeout(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DirectorySettings(timeout_seconds=0).validate()
        assert exc_info.value.config_field == "directory.timeout_seconds"

    def test_validate_cache_path_parent_exists(self, tmp_path):
        DirectorySettings(cache_path=tmp_path / "snap.sqlite").validate()

    def test_validate_cache_path_parent_missing(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            DirectorySettings(cache_path=tmp_path / "missing" / "snap.sqlite").validate()
        assert "Cache directory does not exist" in str(exc_info.value)
        assert exc_info.value.suggestions


class TestOutputAndLoggingSettings:

    def test_output_defaults(self):
        settings = OutputSettings()
        assert settings.indent == 2
        assert settings.include_warnings is True

    def test_negative_indent(self):
        with pytest.raises(ConfigurationError):
            OutputSettings(indent=-1).validate()

    def test_log_dir_missing(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            LoggingSettings(file_path=tmp_path / "nope" / "run.log").validate()
        assert exc_info.value.config_field == "logging.file_path"


class TestSettings:
    """Test the aggregate Settings object and the global accessors."""

    def test_defaults_validate(self):
        Settings().validate()

    def test_to_dict(self, tmp_path):
        settings = Settings(directory=DirectorySettings(source="pincodes.json", cache_path=tmp_path / "s.sqlite"))
        d = settings.to_dict()
        assert d["encoder"]["range_threshold"] == 3
        assert d["directory"]["source"] == "pincodes.json"
        assert d["directory"]["cache_path"] == str(tmp_path / "s.sqlite")
        assert d["runtime"] == {"debug_mode": False, "dry_run": False}

    def test_nested_error_propagates(self):
        with pytest.raises(ConfigurationError):
            Settings(encoder=EncoderSettings(range_threshold=0)).validate()

    def test_get_settings_uninitialised(self):
        with pytest.raises(ConfigurationError, match="Settings not initialized"):
            get_settings()

    def test_set_and_get(self):
        settings = Settings(debug_mode=True)
        set_settings(settings)
        assert get_settings() is settings

    def test_set_settings_validates(self):
        with pytest.raises(ConfigurationError):
            set_settings(Settings(output=OutputSettings(indent=-2)))
        with pytest.raises(ConfigurationError):
            get_settings()
