"""
Logging setup for the Alert API.

Webhook deliveries, per-alert failures (with the offending payload) and
database checks are all logged through module loggers; this only decides
where those records go and at which level.
"""

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level_name: str = "INFO") -> None:
    """
    Apply LOG_LEVEL to the root logger.

    When the root logger already has handlers (pytest's capture, an embedding
    process) only the level changes; otherwise a stderr handler is added.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)
