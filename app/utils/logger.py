"""
Logging utilities
"""
import logging
from app.config import settings


def setup_logger(name: str) -> logging.Logger:
    """
    Setup logger with consistent formatting

    Level and format come from settings, so LOG_LEVEL=DEBUG also shows
    the rows the ps parser skips.
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        logger.addHandler(handler)
        # uvicorn installs its own root handlers; avoid printing twice
        logger.propagate = False

    return logger
