import sys
from loguru import logger
from inventory_tracker.core.config import Settings


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, rotation="500 MB", level="DEBUG")
