import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(log_level: str = "INFO") -> None:
    """Replace loguru's default sink with a formatted stderr sink at `log_level`."""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper(), format=LOG_FORMAT)
    logger.debug(f"Logging configured at level {log_level}")
