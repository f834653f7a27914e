import logging

from ..config import settings

log_level = logging.DEBUG if settings.DEBUG else logging.INFO

# Check if handlers already exist to avoid re-configuring under reloaders
if not logging.root.handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

logger = logging.getLogger(__name__)
logger.debug("Core logging configured.")


def get_logger(name: str) -> logging.Logger:
    """Helper to get a logger instance for a specific module."""
    return logging.getLogger(name)
