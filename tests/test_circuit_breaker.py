"""
tests/test_circuit_breaker.py

Pytest unit tests for CircuitBreaker state transitions. The clock is
injected so no test sleeps.
"""

from __future__ import annotations

import pytest

from app.config import CircuitBreakerSettings
from app.connectors.circuit_breaker import STATE_CLOSED, STATE_HALF_OPEN, STATE_OPEN, CircuitBreaker


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def breaker(clock: FakeClock) -> CircuitBreaker:
    return CircuitBreaker(
        name="object",
        settings=CircuitBreakerSettings(failure_threshold=2, recovery_timeout_seconds=10.0),
        clock=clock,
    )


def test_opens_after_consecutive_failures(breaker: CircuitBreaker) -> None:
    breaker.record_failure()
    assert breaker.allow_request()

    breaker.record_failure()

    assert breaker.state == STATE_OPEN
    assert not breaker.allow_request()


def test_success_resets_failure_count(breaker: CircuitBreaker) -> None:
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()

    assert breaker.state == STATE_CLOSED


def test_half_open_allows_single_trial(breaker: CircuitBreaker, clock: FakeClock) -> None:
    breaker.record_failure()
    breaker.record_failure()
    clock.now = 10.0

    assert breaker.state == STATE_HALF_OPEN
    assert breaker.allow_request()
    assert not breaker.allow_request()


def test_trial_success_closes(breaker: CircuitBreaker, clock: FakeClock) -> None:
    breaker.record_failure()
    breaker.record_failure()
    clock.now = 11.0
    breaker.allow_request()

    breaker.record_success()

    assert breaker.state == STATE_CLOSED
    assert breaker.allow_request()


def test_trial_failure_reopens(breaker: CircuitBreaker, clock: FakeClock) -> None:
    breaker.record_failure()
    breaker.record_failure()
    clock.now = 11.0
    breaker.allow_request()

    breaker.record_failure()

    assert breaker.state == STATE_OPEN
    assert not breaker.allow_request()
    clock.now = 21.0
    assert breaker.allow_request()
