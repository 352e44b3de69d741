"""Logger configuration for the ingestor process."""

import sys

from loguru import logger


def setup_logging(level: str = "INFO", serialize: bool = False) -> None:
    """Send all log records to stderr.

    Replaces loguru's default handler with a single stderr sink at ``level``.
    With ``serialize`` each record is written as one JSON line.
    """
    logger.remove()

    if serialize:
        logger.add(sys.stderr, level=level.upper(), serialize=True)
        return

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level.upper(),
        colorize=None,
    )
