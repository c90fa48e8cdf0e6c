"""Logging for desktop-access.

Every module logs through a child of the ``desktop_access`` logger.
Handlers are attached once, to that package logger, when the API
application is created.
"""

import logging
import logging.handlers
import os

# All package loggers live under this namespace
LOGGER_PREFIX = "desktop_access"

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LOG_FILE_NAME = "desktop-access.log"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _qualified(name: str) -> str:
    if name == LOGGER_PREFIX or name.startswith(f"{LOGGER_PREFIX}."):
        return name
    return f"{LOGGER_PREFIX}.{name}"


def configure_logging(
    level: str = "INFO",
    log_dir: str = "/var/log/desktop-access",
    log_to_file: bool = False,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach handlers to the package logger.

    Calling this again only changes the level; handlers are added on the
    first call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log file
        log_to_file: Also write to ``<log_dir>/desktop-access.log``
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        The package logger

    Raises:
        ValueError: If the level is not a known logging level
    """
    level_upper = level.upper()
    if level_upper not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(LOG_LEVELS)}"
        )

    logger = logging.getLogger(LOGGER_PREFIX)
    logger.setLevel(getattr(logging, level_upper))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a package logger by name, relative to ``desktop_access``."""
    return logging.getLogger(_qualified(name))
