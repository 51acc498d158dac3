"""Logging configuration helpers."""

import logging

LOGGER_NAME = "nutrition_parser"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the package logger and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
