"""
Centralized logging configuration for the GoMarketplace cart.

Usage:
    from gomarket.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart loaded")
    logger.error("Cart write failed", exc_info=True)
"""

import logging
import os
import sys
from functools import cache

# LOG_FORMAT_SIMPLE is used when APP_ENV=production
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Third-party loggers that are noisy at INFO (the Upstash client sits on httpx)
QUIET_LOGGERS = ("httpx", "httpcore")


def _level_from_env() -> int:
    """LOG_LEVEL as a logging constant; unknown names fall back to INFO."""
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _install_stdout_handler() -> None:
    """
    Route cart logs to stdout.

    Does nothing when the host application (uvicorn, pytest) has already
    attached handlers to the root logger.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = _level_from_env()
    production = os.environ.get("APP_ENV", "").lower() == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if production else LOG_FORMAT))

    root.setLevel(level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_install_stdout_handler()


@cache
def get_logger(name: str) -> logging.Logger:
    """Module logger for the cart package (pass __name__)."""
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape control characters that could forge log entries (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | None, max_length: int = 32) -> str:
    """
    Make an externally assigned id safe to put in a log line.

    Args:
        id_value: Product id (can be None or empty)
        max_length: Longer ids are truncated with a trailing "..."

    Returns:
        Escaped id, or "N/A" when there is nothing to log
    """
    if not id_value:
        return "N/A"
    safe_value = _escape_log_injection(str(id_value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
]
