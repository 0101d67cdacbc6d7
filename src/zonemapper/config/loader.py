"""Configuration loading from CLI and programmatic sources."""

import logging
from pathlib import Path
from dataclasses import replace
from zonemapper.config.settings import Settings, LogLevel
from zonemapper.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

class ConfigurationLoader:
    """Loads configuration from CLI args and system defaults."""

    def load_from_cli_args(self, args) -> Settings:
        """Load configuration from CLI arguments."""
        try:
            settings = self.load_defaults()

            encoder_updates = {}
            if getattr(args, 'range_threshold', None):
                encoder_updates['range_threshold'] = args.range_threshold
            if getattr(args, 'coverage_threshold', None) is not None:
                encoder_updates['coverage_threshold_percent'] = args.coverage_threshold

            directory_updates = {}
            if getattr(args, 'directory', None):
                directory_updates['source'] = str(args.directory)
            if getattr(args, 'cache_path', None):
                directory_updates['cache_path'] = Path(args.cache_path)
            if hasattr(args, 'fresh_cache'):
                directory_updates['fresh_cache'] = bool(args.fresh_cache)
            if getattr(args, 'no_cache', False):
                directory_updates['use_cache'] = False
            if getattr(args, 'timeout', None):
                directory_updates['timeout_seconds'] = float(args.timeout)

            output_updates = {}
            if getattr(args, 'output_dir', None):
                output_updates['output_dir'] = Path(args.output_dir)
            if getattr(args, 'no_warnings', False):
                output_updates['include_warnings'] = False

            logging_updates = {}
            if getattr(args, 'log_file', None):
                logging_updates['file_path'] = Path(args.log_file)
            if getattr(args, 'debug', False):
                logging_updates['level'] = LogLevel.DEBUG

            return replace(
                settings,
                encoder=replace(settings.encoder, **encoder_updates),
                directory=replace(settings.directory, **directory_updates),
                output=replace(settings.output, **output_updates),
                logging=replace(settings.logging, **logging_updates),
                debug_mode=getattr(args, 'debug', False),
                dry_run=getattr(args, 'dry_run', False),
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from CLI arguments: {str(e)}"
            ) from e

    def load_defaults(self) -> Settings:
        """Dataclass defaults; every section validates as-is."""
        return Settings()


def configure_from_cli(args) -> Settings:
    """Main entry point to configure settings from CLI args."""
    loader = ConfigurationLoader()
    settings = loader.load_from_cli_args(args)
    settings.validate()
    return settings
