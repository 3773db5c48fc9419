"""
Logging for the dashboard.

All module loggers live under the "geo_sentiment" logger, which owns the only
handler. Module loggers stay at NOTSET so set_log_level on the package logger
reaches every module at once.
"""
import logging
import sys

PACKAGE_LOGGER = "geo_sentiment"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def _package_logger() -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        # Streamlit installs its own root handlers
        root.propagate = False
    return root


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    _package_logger()
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    _package_logger().setLevel(level)
