"""
Logging configuration for dbmeta.

All output goes through loguru. Catalog queries issued by SQLAlchemy are
logged through the standard ``logging`` module; when SQL logging is
enabled those records are forwarded into loguru so one sink sees both.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} | {message}"

SQL_LOGGER = "sqlalchemy.engine"


class _LoguruForwarder(logging.Handler):
    """Re-emit standard library log records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


_forwarder = _LoguruForwarder()


def _configure_sql_logging(enabled: bool) -> None:
    sql_logger = logging.getLogger(SQL_LOGGER)
    if _forwarder in sql_logger.handlers:
        sql_logger.removeHandler(_forwarder)
    if enabled:
        sql_logger.addHandler(_forwarder)
        sql_logger.setLevel(logging.INFO)
        sql_logger.propagate = False
    else:
        sql_logger.setLevel(logging.WARNING)
        sql_logger.propagate = True


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    log_sql: bool = False,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        rotation: Log file rotation size
        retention: Log file retention period
        log_sql: Forward the SQL statements SQLAlchemy executes
    """
    logger.remove()
    logger.configure(extra={"name": "dbmeta"})

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    _configure_sql_logging(log_sql)


def get_logger(name: str | None = None) -> "Logger":
    """
    Get a logger instance.

    Args:
        name: Logger name (module name)

    Returns:
        Logger bound to ``name``, shown in place of the loguru module name
    """
    return logger.bind(name=name or "dbmeta")
