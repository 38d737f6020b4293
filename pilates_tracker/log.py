import logging
import sys

from pilates_tracker.config import LOG_LEVEL


def setup_logging(level=None) -> None:
    fmt = "[%(levelname)s] %(name)s | %(message)s"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    if level is None:
        level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=[handler])
