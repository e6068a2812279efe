"""Client side gate for server imposed rate limits.

When the service answers 429 it sends a ``Retry-After`` header. The gate
remembers until when requests are suspended and refuses new ones before
that time without touching the network.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .errors import MalformedThrottleHeaderError, RateLimitedError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def parse_retry_after(value: str | int | None) -> int:
    """Parse a ``Retry-After`` value as a whole number of seconds.

    Raises:
        MalformedThrottleHeaderError: If the value is missing, not an integer
            or negative.
    """
    if isinstance(value, bool) or value is None:
        raise MalformedThrottleHeaderError(value)
    if isinstance(value, int):
        seconds = value
    else:
        text = value.strip()
        # isdigit alone admits non-ASCII digits such as "²"
        if not (text.isascii() and text.isdigit()):
            raise MalformedThrottleHeaderError(value)
        seconds = int(text)
    if seconds < 0:
        raise MalformedThrottleHeaderError(value)
    return seconds


class ThrottleGate:
    """Tracks the earliest time at which a request may be sent.

    One gate belongs to one client. Access to ``next_allowed`` is serialized
    by a lock, so threads and coroutines sharing a client never lose an
    update.

    Attributes:
        clock: Callable returning the current time as an aware datetime.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self.clock = clock or _utcnow
        self._lock = threading.Lock()
        self._next_allowed = self.clock()

    @property
    def next_allowed(self) -> datetime:
        with self._lock:
            return self._next_allowed

    def remaining(self, now: datetime | None = None) -> timedelta:
        """Return how long requests are still suspended (zero if admitted)."""
        now = now or self.clock()
        with self._lock:
            wait = self._next_allowed - now
        return max(wait, timedelta(0))

    def check_and_admit(self, now: datetime | None = None) -> None:
        """Admit a request, or refuse it if the suspension has not elapsed.

        Raises:
            RateLimitedError: If ``now`` is before ``next_allowed``.
        """
        now = now or self.clock()
        with self._lock:
            next_allowed = self._next_allowed
        if now < next_allowed:
            wait = next_allowed - now
            logger.warning(
                "Request refused by throttle gate, %.0fs left", wait.total_seconds()
            )
            raise RateLimitedError(wait)

    def record_throttle(
        self, retry_after: str | int | None, now: datetime | None = None
    ) -> datetime:
        """Suspend requests for ``retry_after`` seconds from ``now``.

        The value is parsed before the gate is touched, so a malformed value
        leaves it unchanged.

        Returns:
            The new ``next_allowed`` time.

        Raises:
            MalformedThrottleHeaderError: If ``retry_after`` is not a whole
                number of seconds.
        """
        seconds = parse_retry_after(retry_after)
        now = now or self.clock()
        with self._lock:
            self._next_allowed = now + timedelta(seconds=seconds)
            next_allowed = self._next_allowed
        logger.warning("Throttled by server for %ds, until %s", seconds, next_allowed)
        return next_allowed
