"""Request pacing policies for the Dynu API rate limit."""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from dynudns._logging import get_logger

logger = get_logger(__name__)

# Seconds between Dynu API requests
DEFAULT_DELAY = 5.0


class Pacer(ABC):
    """Abstract interface for request pacing.

    DynuClient calls wait() immediately before every HTTP request.
    """

    @abstractmethod
    def wait(self) -> None:
        """Block until the next request may be sent."""
        ...


class NoPacer(Pacer):
    """Pacer that never waits."""

    def wait(self) -> None:
        return None


class FixedDelayPacer(Pacer):
    """Sleep a fixed delay before every request.

    Every caller pays the full delay, independently of other callers.

    Args:
        delay: Seconds to sleep per request (default: 5).
        sleep: Sleep function, injectable for tests.
    """

    def __init__(self, delay: float = DEFAULT_DELAY, sleep: Callable[[float], None] = time.sleep):
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay}")
        self.delay = delay
        self._sleep = sleep

    def wait(self) -> None:
        if self.delay:
            self._sleep(self.delay)


class MinimumIntervalPacer(Pacer):
    """Keep consecutive requests at least `interval` seconds apart.

    Unlike FixedDelayPacer this only sleeps for whatever is left of the
    interval since the previous request went out. Safe to share across
    threads; concurrent callers are spaced one after another.

    Args:
        interval: Minimum seconds between request starts.
        clock: Monotonic clock function, injectable for tests.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        interval: float = DEFAULT_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval < 0:
            raise ValueError(f"interval must not be negative, got {interval}")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last: float | None = None

    def wait(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last is not None:
                remaining = self._last + self.interval - now
                if remaining > 0:
                    logger.debug("Pacing request", extra={"sleep_seconds": remaining})
                    self._sleep(remaining)
                    now += remaining
            self._last = now
