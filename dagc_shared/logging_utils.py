"""
Short-named loggers and root logging setup
"""
import logging
from typing import Optional

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def _is_mock(logger) -> bool:
    return hasattr(logger, '_mock_name') or hasattr(logger, '_mock_return_value')


def get_clean_logger(name: str, parent_logger: Optional[logging.Logger] = None) -> logging.Logger:
    """
    Logger called just `name` (e.g. 'mono_agc'), at the parent's level or INFO.

    Mock parents are returned as-is so tests can assert on log calls.
    """
    if parent_logger is not None and _is_mock(parent_logger):
        return parent_logger

    logger = logging.getLogger(name)
    level = getattr(parent_logger, 'level', logging.INFO) if parent_logger is not None else logging.INFO
    logger.setLevel(level if isinstance(level, int) else logging.INFO)
    # no handlers of its own; records propagate to the root handler
    return logger


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root logger; unknown level names fall back to INFO"""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # soundfile's cffi backend is chatty at debug level
    logging.getLogger("cffi").setLevel(logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    return root_logger
