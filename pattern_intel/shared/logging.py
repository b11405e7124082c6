"""
Logging setup for the pattern service.

One stdout handler with a pipe-delimited format, installed once at startup.
Log lines carry identifiers (tenant, strategy, namespace) only; vectors,
metric payloads and API keys are never logged.
"""

import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO.
NOISY_LOGGERS = ("uvicorn.access", "httpx", "sqlalchemy.engine")


def configure_logging(
    level: str = "INFO", quiet: Iterable[str] = NOISY_LOGGERS
) -> None:
    """Install the root handler and raise noisy loggers to WARNING.

    Args:
        level: Root log level name. Unknown names fall back to INFO.
        quiet: Logger names capped at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
