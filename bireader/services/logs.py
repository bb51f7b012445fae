"""Logging configuration for Bilingual Reader."""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import TYPE_CHECKING, Any, Final

import structlog

from bireader import __version__
from bireader.utils import get_app_data_path

if TYPE_CHECKING:
    from pathlib import Path

    from bireader.settings import ViewerSettings

#: Environment variable forcing debug level and console logs.
DEBUG_ENV: Final[str] = "BIREADER_DEBUG"
#: Name of the JSON log file inside the log directory.
LOG_FILE_NAME: Final[str] = "bireader.log.json"
#: Levels offered in the preferences dialog.
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
#: Level used when the stored one is not recognised.
DEFAULT_LOG_LEVEL: Final[str] = "INFO"


def get_log_dir() -> Path:
    """
    Get the path to the log directory, creating it if needed.

    Returns:
        The path to the log directory.

    """
    log_dir = get_app_data_path() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """The JSON log file the viewer writes to."""
    return get_log_dir() / LOG_FILE_NAME


def resolve_level(name: str | None) -> int:
    """
    Turn a level name from the settings into a :mod:`logging` level.

    ``BIREADER_DEBUG`` wins over any stored level.  Unknown names fall back
    to :data:`DEFAULT_LOG_LEVEL`.

    Args:
        name: A level name such as ``"WARNING"``, or ``None``

    Returns:
        The numeric level

    """
    if DEBUG_ENV in os.environ:
        return logging.DEBUG
    name = (name or DEFAULT_LOG_LEVEL).strip().upper()
    if name not in LOG_LEVELS:
        name = DEFAULT_LOG_LEVEL
    return logging.getLevelName(name)


def add_app_info(
    logger: Any, method_name: str, event_dict: dict[str, Any]  # noqa: ARG001
) -> dict[str, Any]:
    """Stamp every entry with the viewer's version."""
    event_dict.setdefault("app_version", __version__)
    return event_dict


def set_log_level(name: str | None) -> int:
    """
    Change the root logger's level without reconfiguring handlers.

    Args:
        name: The new level name

    Returns:
        The numeric level now in effect

    """
    level = resolve_level(name)
    logging.getLogger().setLevel(level)
    return level


def configure_logging(settings: ViewerSettings | None = None) -> None:
    """
    Configure structlog and standard logging.

    - JSON logs to :data:`LOG_FILE_NAME`, rotated every three weeks.
    - The level comes from ``settings.log_level``.
    - ``BIREADER_DEBUG`` forces debug level and adds console logs.

    Keyword Args:
        settings: Viewer settings supplying the level; ``INFO`` when omitted

    """
    file_handler = logging.handlers.TimedRotatingFileHandler(
        get_log_file_path(),
        when="D",
        interval=21,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(ensure_ascii=False),
        )
    )
    handlers: list[logging.Handler] = [file_handler]

    if DEBUG_ENV in os.environ:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(),
            )
        )
        handlers.append(console_handler)

    logging.basicConfig(
        handlers=handlers,
        level=resolve_level(settings.log_level if settings else None),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            add_app_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        A structlog logger

    """
    return structlog.get_logger(name)
