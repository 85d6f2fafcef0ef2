"""
Logging configuration for the sync service, its CLIs and the API
"""

import json
import logging
import sys
from typing import Optional
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Driver and scheduler internals are chatty at INFO
NOISY_LOGGERS = ("pymongo", "google", "urllib3", "apscheduler.executors")


class ErrorContextFormatter(logging.Formatter):
    """Append ``extra={"error_context": ...}`` payloads as one JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        error_context = getattr(record, "error_context", None)
        if error_context:
            message += f" | error_context={json.dumps(error_context, default=str)}"
        return message


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once per process"""
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ErrorContextFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler])

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level_name} level ({settings.ENVIRONMENT})")
