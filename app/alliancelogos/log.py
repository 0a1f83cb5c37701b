import logging
from typing import Optional, Union

from .config import Settings, get_settings

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def parse_level(value: Union[int, str, None]) -> int:
    """Level number for a name such as "debug" or "WARNING"; INFO when unknown."""
    if isinstance(value, int):
        return value
    return logging._nameToLevel.get(str(value or "").upper(), logging.INFO)


def configure_logging(settings: Optional[Settings] = None, level: Union[int, str, None] = None) -> int:
    """Configure root logging for a run and return the level applied.

    An explicit level wins; otherwise settings.log_level is used.
    """
    if level is None:
        level = (settings or get_settings()).log_level
    resolved = parse_level(level)
    logging.basicConfig(level=resolved, format=DEFAULT_LOG_FORMAT)
    return resolved
