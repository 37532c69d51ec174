"""Logging utilities for the SyncFM Linker service."""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER_NAME = "syncfm_linker"


def parse_log_level(level: int | str) -> int:
    """Translate a level name such as ``"debug"`` or a numeric level into an int."""

    if isinstance(level, int):
        return level

    candidate = level.strip()
    if candidate.isdigit():
        return int(candidate)

    resolved = logging.getLevelName(candidate.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install the service log format when unset and apply ``level`` to the root logger."""

    numeric_level = parse_log_level(level)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    root_logger.setLevel(numeric_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger, installing the default format on first use.

    The root level is only touched when no handler exists yet, so a level chosen
    through :func:`configure_logging` survives later imports.
    """

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)
