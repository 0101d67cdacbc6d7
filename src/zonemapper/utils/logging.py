import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

ROOT_LOGGER = "zonemapper"
FILE_FORMAT = "{asctime} {levelname:<7} {name} - {message}"
SUMMARY_FORMAT = "{asctime} SUMMARY - {message}"
CONSOLE_FORMAT = "{levelname:<7} {message}"


def _log_file_path(log_dir: str) -> Path:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return directory / f"{ROOT_LOGGER}_{stamp}.log"


def _dict_config(level: str, log_path: Optional[Path]) -> dict:
    handlers = {}
    if log_path is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "detailed",
            "filename": str(log_path),
            "encoding": "utf-8",
            "mode": "w",
            "level": "DEBUG",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"detailed": {"format": FILE_FORMAT, "style": "{"}},
        "handlers": handlers,
        "loggers": {
            ROOT_LOGGER: {"level": level, "handlers": list(handlers), "propagate": False},
        },
        "root": {"handlers": []},
    }


def _reset_summary_logger() -> logging.Logger:
    summary = logging.getLogger(f"{ROOT_LOGGER}.summary")
    summary.setLevel(logging.INFO)
    summary.propagate = False
    for handler in list(summary.handlers):
        summary.removeHandler(handler)
        handler.close()
    return summary


def setup_logging(
    log_dir: Optional[str] = "./logs",
    console: bool = True,
    level: str = "INFO",
    quiet_console: bool = False,
    console_level: Optional[str] = None,
) -> Tuple[logging.Logger, logging.Logger]:
    """
    Configure the ``zonemapper`` logger tree for a CLI run.

    The library modules only ever call ``logging.getLogger(__name__)``; this
    is invoked once by the entry point.

    Args:
        log_dir: Directory for a timestamped log file, or None for no file
        console: Attach a stderr handler
        level: Level of the ``zonemapper`` logger
        quiet_console: Only errors from the summary logger reach the console
        console_level: Console threshold when it should differ from ``level``

    Returns:
        ``(logger, summary_logger)``. The summary logger carries per-run
        totals and stays visible even when the console is quiet.
    """
    log_path = _log_file_path(log_dir) if log_dir else None
    logging.config.dictConfig(_dict_config(level, log_path))
    logging.captureWarnings(True)

    logger = logging.getLogger(ROOT_LOGGER)
    summary_logger = _reset_summary_logger()

    if log_path is not None:
        summary_file = logging.FileHandler(str(log_path), encoding="utf-8", mode="a")
        summary_file.setLevel(logging.INFO)
        summary_file.setFormatter(logging.Formatter(SUMMARY_FORMAT, style="{"))
        summary_logger.addHandler(summary_file)

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(CONSOLE_FORMAT, style="{"))
        if quiet_console:
            stream.setLevel(logging.ERROR)
        else:
            stream.setLevel(getattr(logging, (console_level or level).upper()))
            logger.addHandler(stream)
        summary_logger.addHandler(stream)

    logger.info("Logging initialised. File: %s", log_path or "<none>")
    return logger, summary_logger
