import argparse
import pytest
from pathlib import Path

from zonemapper.config.loader import ConfigurationLoader, configure_from_cli
from zonemapper.config.settings import LogLevel
from zonemapper.domain.exceptions import ConfigurationError


def _args(**kwargs):
    return argparse.Namespace(**kwargs)


class TestConfigurationLoader:
    """Building Settings from argparse namespaces."""

    def test_defaults(self):
        settings = ConfigurationLoader().load_defaults()
        assert settings.encoder.range_threshold == 3
        assert settings.directory.source is None
        assert settings.logging.level is LogLevel.INFO

    def test_empty_namespace_gives_defaults(self):
        settings = ConfigurationLoader().load_from_cli_args(_args())
        assert settings == ConfigurationLoader().load_defaults()

    def test_cli_overrides(self, tmp_path):
        args = _args(
            directory="https://example.test/pincodes.json",
            cache_path=str(tmp_path / "snap.sqlite"),
            fresh_cache=True,
            no_cache=False,
            timeout=5,
            range_threshold=4,
            coverage_threshold=75.0,
            output_dir=str(tmp_path / "out"),
            no_warnings=True,
            debug=True,
            dry_run=True,
        )
        settings = ConfigurationLoader().load_from_cli_args(args)

        assert settings.directory.source == "https://example.test/pincodes.json"
        assert settings.directory.cache_path == tmp_path / "snap.sqlite"
        assert settings.directory.fresh_cache is True
        assert settings.directory.timeout_seconds == 5.0
        assert settings.encoder.range_threshold == 4
        assert settings.encoder.coverage_threshold_percent == 75.0
        assert settings.output.output_dir == tmp_path / "out"
        assert settings.output.include_warnings is False
        assert settings.logging.level is LogLevel.DEBUG
        assert settings.debug_mode is True
        assert settings.dry_run is True

    def test_zero_coverage_threshold_kept(self):
        settings = ConfigurationLoader().load_from_cli_args(_args(coverage_threshold=0.0))
        assert settings.encoder.coverage_threshold_percent == 0.0

    def test_no_cache(self):
        settings = ConfigurationLoader().load_from_cli_args(_args(no_cache=True))
        assert settings.directory.use_cache is False

    def test_log_file(self, tmp_path):
        settings = ConfigurationLoader().load_from_cli_args(_args(log_file=str(tmp_path / "run.log")))
        assert settings.logging.file_path == Path(tmp_path / "run.log")


class TestConfigureFromCli:

    def test_validates(self):
        with pytest.raises(ConfigurationError) as exc_info:
            configure_from_cli(_args(range_threshold=-1))
        assert exc_info.value.config_field == "encoder.range_threshold"

    def test_valid(self):
        settings = configure_from_cli(_args(directory="pincodes.json"))
        assert settings.directory.source == "pincodes.json"
