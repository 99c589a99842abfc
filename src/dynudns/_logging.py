"""Logging utilities for dynudns library."""

import logging
import time
from collections.abc import Mapping
from contextvars import ContextVar, Token

# NullHandler on root logger (library best practice)
_root = logging.getLogger("dynudns")
_root.addHandler(logging.NullHandler())

# Zone being reconciled by the current Present/CleanUp call
_current_zone: ContextVar[str | None] = ContextVar("current_zone", default=None)

REDACTED = "********"
SECRET_HEADERS = frozenset({"api-key", "authorization"})


def set_zone(zone: str | None) -> Token[str | None]:
    """Set current zone for logging context.

    Args:
        zone: Zone hostname being processed.

    Returns:
        Token to reset the context.
    """
    return _current_zone.set(zone)


def reset_zone(token: Token[str | None]) -> None:
    """Reset zone context.

    Args:
        token: Token from set_zone() call.
    """
    _current_zone.reset(token)


def get_zone_extra() -> dict[str, str]:
    """Get zone info for log extra fields.

    Returns:
        Dict with 'zone', or empty dict when no zone is set.
    """
    zone = _current_zone.get()
    if zone is None:
        return {}
    return {"zone": zone}


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of headers that is safe to log."""
    return {
        name: REDACTED if name.lower() in SECRET_HEADERS else value
        for name, value in headers.items()
    }


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the dynudns namespace.

    Args:
        name: The module name (typically __name__).

    Returns:
        A logger instance for the module.
    """
    return logging.getLogger(name)


class Timer:
    """Context manager for timing operations.

    Usage:
        with Timer() as t:
            # do work
        print(f"Elapsed: {t.elapsed_ms}ms")
    """

    def __init__(self) -> None:
        self.elapsed_ms: float = 0
        self._start: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
