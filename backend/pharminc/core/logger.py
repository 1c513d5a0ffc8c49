import logging

from pharminc.core.config import settings

ROOT_LOGGER_NAME = "pharminc"

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.setLevel(settings.LOG_LEVEL.upper())

# Avoid duplicate handlers on re-import
if not _root.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    ))
    _root.addHandler(handler)


def get_service_logger(name: str) -> logging.Logger:
    """Logger for one service area, e.g. get_service_logger("Job")."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
