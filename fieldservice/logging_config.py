"""Logging setup shared by both services."""

import logging


def configure_logging(level: str | int = logging.INFO) -> None:
    logger = logging.getLogger("fieldservice")
    logger.setLevel(level)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        ch.setFormatter(fmt)
        logger.addHandler(ch)
