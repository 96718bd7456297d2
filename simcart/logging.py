"""
Logging setup for SimCart.

Importing this module attaches one stdout handler to the root logger (unless
the host app already configured one). Modules then ask for their own logger:

    from simcart.logging import get_logger
    logger = get_logger(__name__)

Cart keys and product ids come from clients, so they go through the
sanitize_* helpers before reaching a log line.
"""

import logging
import os
import sys
from functools import cache

_FORMATS = {
    "local": "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
    # Vercel stamps each line itself
    "vercel": "%(levelname)s [%(name)s] %(message)s",
}

# Upstash and Supabase clients both log every request through httpx
_QUIET_LOGGERS = ("httpx", "httpcore")

# CWE-117: control characters could forge extra log entries
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})

_ID_PREFIX_LENGTH = 8


def _level_from_env() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = _level_from_env()
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    style = "vercel" if os.environ.get("VERCEL") == "1" else "local"
    handler.setFormatter(logging.Formatter(_FORMATS[style]))

    root.setLevel(level)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually get_logger(__name__)."""
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    First 8 characters of a product/session/user id, escaped.

    Returns:
        Escaped prefix or "N/A" if empty
    """
    if not id_value:
        return "N/A"
    return str(id_value).translate(_LOG_ESCAPES)[:_ID_PREFIX_LENGTH]


def sanitize_cart_key_for_logging(cart_key: str | None) -> str:
    """
    Cart key with its owner id shortened.

    "cart:session:7f3c9a0e-..." logs as "cart:session:7f3c9a0e", so the cart
    kind stays readable while the session id is cut like any other id.
    """
    if not cart_key:
        return "N/A"
    kind, sep, owner = str(cart_key).rpartition(":")
    if not sep:
        return sanitize_id_for_logging(owner)
    return f"{kind.translate(_LOG_ESCAPES)}:{sanitize_id_for_logging(owner)}"


__all__ = [
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_cart_key_for_logging",
]
