"""Logging setup for the blog API: console plus an optional rotating log file."""
import logging
import os
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "blog_api"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Configure the ``blog_api`` logger once and return it.

    ``LOG_LEVEL`` sets the console level, ``LOG_FILE`` the rotating file
    (``app.log`` by default, an empty value disables the file).
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    level = level or os.getenv("LOG_LEVEL", "INFO")
    log_file = os.getenv("LOG_FILE", "app.log") if log_file is None else log_file

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level.upper())
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=2000000, backupCount=3, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
