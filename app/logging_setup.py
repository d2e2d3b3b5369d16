# app/logging_setup.py
import logging

from app.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s]: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Console logging for the whole process; the logger name is the context tag."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # httpx logs every request at INFO; the cache already logs what matters
    logging.getLogger("httpx").setLevel(logging.WARNING)
