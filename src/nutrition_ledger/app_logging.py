"""Logging configuration helpers."""

import logging

LOGGER_NAME = "nutrition_ledger"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure ledger logging with a single stream handler.

    ``level`` accepts a level number or a name such as ``"debug"``. Calling
    again only updates the level, so settings can be applied after startup.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
        )
        logger.addHandler(handler)
        logger.propagate = False
    return logger
