import sys
from loguru import logger
from campuslease.core.config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"


def setup_logging(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    logger.remove()

    logger.add(
        sys.stdout,
        level=level,
        format=LOG_FORMAT,
    )

    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention="14 days",
            level=level,
            format=LOG_FORMAT,
        )

    logger.info("Logging initialized")
