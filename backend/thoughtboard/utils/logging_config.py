"""
Structured Logging Configuration for the Thoughtboard backend

Uses loguru with:
- Human-readable console output
- Optional file rotation with compression
- Standard library logging routed through loguru
"""

import sys
import logging
from pathlib import Path

from loguru import logger as loguru_logger

from thoughtboard.config import settings


# Log directory (created on demand when file logging is enabled)
LOG_DIR = Path("logs")


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages and redirect to Loguru.
    This allows compatibility with third-party libraries using standard logging.
    """

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """
    Configure Loguru for production use.
    Call this once at application startup.
    """
    # Remove default handler
    loguru_logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    loguru_logger.configure(extra={"name": "app"})

    loguru_logger.add(
        sys.stdout,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=settings.DEBUG,
    )

    if settings.LOG_TO_FILE:
        LOG_DIR.mkdir(exist_ok=True)

        # File handler - All logs (INFO and above)
        loguru_logger.add(
            LOG_DIR / "app.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}",
            level="INFO",
            rotation="00:00",  # New file at midnight
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=settings.DEBUG,
            encoding="utf-8",
        )

        # File handler - Error logs only
        loguru_logger.add(
            LOG_DIR / "error.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}",
            level="ERROR",
            rotation="00:00",
            retention="90 days",
            compression="zip",
            backtrace=True,
            diagnose=True,
            encoding="utf-8",
        )

    # Intercept standard logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def get_logger(name: str):
    """
    Get a logger for a specific module.

    Usage:
        from thoughtboard.utils.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return loguru_logger.bind(name=name)


fastapi_logger = loguru_logger.bind(name="fastapi")
database_logger = loguru_logger.bind(name="database")
auth_logger = loguru_logger.bind(name="auth")
board_logger = loguru_logger.bind(name="board")
thought_logger = loguru_logger.bind(name="thought")
connection_logger = loguru_logger.bind(name="connection")


__all__ = [
    "setup_logging",
    "get_logger",
    "loguru_logger",
    "fastapi_logger",
    "database_logger",
    "auth_logger",
    "board_logger",
    "thought_logger",
    "connection_logger",
]
