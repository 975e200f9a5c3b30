"""
Loguru setup for the EcoCiudad API.

Development logs are colored console lines, other environments emit one
JSON object per line. Every record carries the request's correlation ID.
The test environment logs to stderr only.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from core.correlation import get_correlation_id

if TYPE_CHECKING:
    from loguru import Record

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[correlation_id]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def correlation_filter(record: "Record") -> bool:
    """Attach the correlation ID to the record; never drops messages."""
    record["extra"]["correlation_id"] = get_correlation_id() or "-"
    return True


def configure_logging(environment: str = "development", log_dir: str = "logs") -> None:
    """
    Configure Loguru for the application.

    Args:
        environment: "development" for console output, "test" for console
            output without a log file, anything else for JSON.
        log_dir: Directory of the rotating application log file.
    """
    logger.remove()

    human_readable = environment in ("development", "test")

    if human_readable:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="DEBUG" if environment == "development" else "WARNING",
            filter=correlation_filter,
            colorize=environment == "development",
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            filter=correlation_filter,
            serialize=True,
        )

    if environment == "test":
        return

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(log_dir) / "app.log"),
        format=CONSOLE_FORMAT if human_readable else "{message}",
        level="INFO",
        filter=correlation_filter,
        rotation="10 MB",
        retention="7 days",
        serialize=not human_readable,
    )
