"""
app/connectors/circuit_breaker.py

In-process circuit breaker shared by all calls of one service client.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from app.config import CircuitBreakerSettings

logger = logging.getLogger(__name__)

STATE_CLOSED = "closed"
STATE_OPEN = "open"
STATE_HALF_OPEN = "half-open"


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    After ``failure_threshold`` failures in a row the breaker opens and
    rejects calls until ``recovery_timeout_seconds`` have elapsed. The next
    call is then let through as a trial (half-open); its result closes or
    reopens the breaker.
    """

    def __init__(
        self,
        *,
        name: str,
        settings: CircuitBreakerSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._failure_threshold = max(1, settings.failure_threshold)
        self._recovery_timeout_seconds = settings.recovery_timeout_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._failures = 0
        self._opened_at: float | None = None
        self._state = STATE_CLOSED
        self._trial_in_flight = False

    @property
    def state(self) -> str:
        with self._lock:
            return self._current_state()

    def allow_request(self) -> bool:
        """
        Return True when a call may be attempted right now.
        """

        with self._lock:
            state = self._current_state()
            if state == STATE_CLOSED:
                return True
            if state == STATE_HALF_OPEN and not self._trial_in_flight:
                self._state = STATE_HALF_OPEN
                self._trial_in_flight = True
                return True
            return False

    def record_success(self) -> None:
        with self._lock:
            if self._state != STATE_CLOSED:
                logger.info("Circuit breaker closed name=%s", self.name)
            self._failures = 0
            self._opened_at = None
            self._state = STATE_CLOSED
            self._trial_in_flight = False

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._trial_in_flight = False
            if self._state == STATE_HALF_OPEN or self._failures >= self._failure_threshold:
                if self._state != STATE_OPEN:
                    logger.warning(
                        "Circuit breaker opened name=%s failures=%s",
                        self.name,
                        self._failures,
                    )
                self._state = STATE_OPEN
                self._opened_at = self._clock()

    def _current_state(self) -> str:
        # Caller holds the lock.
        if self._state == STATE_OPEN and self._opened_at is not None:
            if self._clock() - self._opened_at >= self._recovery_timeout_seconds:
                return STATE_HALF_OPEN
        return self._state
