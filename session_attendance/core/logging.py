# session_attendance/core/logging.py
import logging

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("session_attendance")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
