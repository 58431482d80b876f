"""Logging setup for rtcsignal.

Every module logs through ``logging.getLogger(__name__)`` under the
``rtcsignal`` logger:

    rtcsignal.signaling   INFO     state transitions, closed-connection and
                          WARNING  illegal-transition rejections
    rtcsignal.peer        WARNING  rejected descriptions and ICE candidates
                          DEBUG    created offers/answers, ignored update_ice
    rtcsignal.builder     DEBUG    built local sessions
    rtcsignal.sdp         DEBUG    why a body was rejected

``log_level`` sets the package level. ``module_log_levels`` overrides it
per module, keyed by the name after ``rtcsignal.`` (e.g. ``sdp: DEBUG``
to see parse failures while the rest of the package stays at INFO).
"""

import logging
from pathlib import Path

from rtcsignal.config import Config

PACKAGE_LOGGER = "rtcsignal"

# 2026-01-27 10:30:45 [INFO] rtcsignal.signaling: message
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger: logging.Logger | None = None
_module_loggers: list[logging.Logger] = []


def parse_level(name: str | None, default: int = logging.INFO) -> int:
    """Map a level name such as "debug" to its logging constant."""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def _apply_module_levels(levels: dict[str, str]) -> None:
    for module, level_name in levels.items():
        module_logger = logging.getLogger(f"{PACKAGE_LOGGER}.{module}")
        module_logger.setLevel(parse_level(level_name))
        _module_loggers.append(module_logger)


def setup_logging(config: Config) -> logging.Logger:
    """Set up the package logger from configuration.

    Only the first call configures anything; later calls return the same
    logger.

    Args:
        config: Configuration object with log settings.

    Returns:
        The ``rtcsignal`` logger.
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(parse_level(config.log_level))
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    _apply_module_levels(config.module_log_levels)

    logger.propagate = False

    _logger = logger
    return logger


def reset_logging() -> None:
    """Reset logging state. Used for testing."""
    global _logger
    for module_logger in _module_loggers:
        module_logger.setLevel(logging.NOTSET)
    _module_loggers.clear()
    if _logger is not None:
        for handler in _logger.handlers:
            handler.close()
        _logger.handlers.clear()
        _logger.propagate = True
        _logger = None
