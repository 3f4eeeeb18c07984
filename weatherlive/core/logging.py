from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "weatherlive"


def configure_logging(level: str | int = "INFO") -> None:
    """Attach a single stream handler to the ``weatherlive`` logger.

    Calling this more than once only updates the level.
    """
    logger = logging.getLogger("weatherlive")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
