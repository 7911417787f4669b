"""
Logging setup for Nettoria.

The root logger gets one stdout handler at import time unless the host
(uvicorn, pytest) already installed its own. Modules take their logger from
``get_logger(__name__)`` and pass item codes and session ids through
``sanitize_string_for_logging`` before interpolating them.
"""

import logging
import os
import re
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# C0 control characters other than the three escaped explicitly below
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _configure_root_logger(level_name: str, production: bool) -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, level_name.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if production else LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    # Upstash's REST client logs every request through httpx at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


_configure_root_logger(
    os.environ.get("LOG_LEVEL", "INFO"),
    production=os.environ.get("NETTORIA_ENV") == "production",
)


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a module, typically ``get_logger(__name__)``."""
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape line breaks and drop control characters (CWE-117)."""
    escaped = value.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return _CONTROL_CHARS.sub("", escaped)


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """
    Make a client-supplied string safe to log.

    Args:
        value: Item code, session id or storage key (can be None)
        max_length: Longest prefix kept; longer values end in "..."

    Returns:
        Escaped string, or "N/A" if empty
    """
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_string_for_logging",
]
