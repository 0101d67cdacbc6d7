"""Runtime settings for encode runs, grouped by concern."""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from zonemapper.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _require(ok: bool, message: str, config_field: str, suggestion: Optional[str] = None) -> None:
    if ok:
        return
    error = ConfigurationError(message, config_field=config_field)
    if suggestion:
        error.add_suggestion(suggestion)
    raise error


def _path_or_none(value: Optional[Path]) -> Optional[str]:
    return str(value) if value else None


@dataclass
class EncoderSettings:
    """
    Knobs of the UTSF encoder.

    ``coverage_threshold_percent`` is the coverage above which a zone is
    stored as "full minus exceptions" rather than as an explicit list.
    """
    range_threshold: int = 3
    coverage_threshold_percent: float = 50.0
    utsf_version: str = "3.0"
    source_format: str = "webapp"

    def validate(self) -> None:
        _require(self.range_threshold >= 1,
                 "range_threshold must be at least 1",
                 "encoder.range_threshold")
        _require(0.0 <= self.coverage_threshold_percent <= 100.0,
                 "coverage_threshold_percent must be between 0 and 100",
                 "encoder.coverage_threshold_percent")
        _require(bool(self.utsf_version),
                 "utsf_version must not be empty",
                 "encoder.utsf_version")


@dataclass
class DirectorySettings:
    """Where the master directory comes from and where its snapshot lives."""
    source: Optional[str] = None
    cache_path: Optional[Path] = None
    fresh_cache: bool = False
    use_cache: bool = True
    timeout_seconds: float = 30.0

    def validate(self) -> None:
        _require(self.timeout_seconds > 0,
                 "timeout_seconds must be positive",
                 "directory.timeout_seconds")
        if self.cache_path:
            _require(self.cache_path.parent.exists(),
                     f"Cache directory does not exist: {self.cache_path.parent}",
                     "directory.cache_path",
                     "Create the directory or use a different path")


@dataclass
class OutputSettings:
    output_dir: Optional[Path] = None
    indent: Optional[int] = 2
    include_warnings: bool = True

    def validate(self) -> None:
        _require(self.indent is None or self.indent >= 0,
                 "indent must be non-negative",
                 "output.indent")


@dataclass
class LoggingSettings:
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    console_output: bool = True

    def validate(self) -> None:
        if self.file_path:
            _require(self.file_path.parent.exists(),
                     f"Log directory does not exist: {self.file_path.parent}",
                     "logging.file_path",
                     "Create the directory or use console logging only")


@dataclass
class Settings:
    """All settings for one CLI invocation."""

    encoder: EncoderSettings = field(default_factory=EncoderSettings)
    directory: DirectorySettings = field(default_factory=DirectorySettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    debug_mode: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        sections = (self.encoder, self.directory, self.output, self.logging)
        try:
            for section in sections:
                section.validate()
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Flattened view for debug logging."""
        directory = asdict(self.directory)
        directory["cache_path"] = _path_or_none(self.directory.cache_path)
        directory.pop("timeout_seconds")
        return {
            'encoder': {k: v for k, v in asdict(self.encoder).items() if k != 'source_format'},
            'directory': directory,
            'output': {
                'output_dir': _path_or_none(self.output.output_dir),
                'include_warnings': self.output.include_warnings,
            },
            'runtime': {'debug_mode': self.debug_mode, 'dry_run': self.dry_run},
        }


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    if _settings is None:
        raise ConfigurationError(
            "Settings not initialized. Call set_settings() first."
        ).add_suggestion("Initialize settings in your application startup")
    return _settings


def set_settings(settings: Settings) -> None:
    """Validate and install the process-wide settings."""
    global _settings
    settings.validate()
    _settings = settings
    logger.info("Configuration loaded and validated successfully")
