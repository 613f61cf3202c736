"""Logging configuration for cvgen.

Every module logs through ``logging.getLogger(__name__)``, so all package
loggers sit below the ``cvgen`` logger configured here. Chatty client
libraries are held at WARNING unless cvgen itself runs at DEBUG.
"""

import logging
import sys

LOGGER_NAME = "cvgen"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that report every request at INFO
NOISY_LOGGERS = ("LiteLLM", "litellm", "httpx", "httpcore", "aiosqlite")

_configured = False


def configure_logging(
    level: str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the cvgen logger.

    Safe to call repeatedly: the stderr handler is installed once and later
    calls only change levels.

    Args:
        level: Log level name. Defaults to INFO; unknown names fall back to INFO.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.

    Returns:
        The ``cvgen`` logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger.setLevel(log_level)

    if not _configured:
        logger.handlers.clear()
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    for handler in logger.handlers:
        handler.setLevel(log_level)

    quiet_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return logger


def reset_logging() -> None:
    """Undo configure_logging (useful for testing)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    _configured = False
