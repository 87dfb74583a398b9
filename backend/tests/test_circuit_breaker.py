"""
Competence Gateway - Circuit Breaker Unit Tests
===============================================

What:  Tests for the CircuitBreaker state machine guarding the competence API.
How:   Drives the breaker directly through record_failure/record_success;
       a zero recovery timeout stands in for waiting.

What we test:
    ✅ Starts closed and tolerates failures under the threshold
    ✅ Opens at the threshold and rejects calls with the remaining time
    ✅ Half-open after the recovery timeout; success closes, failure reopens
"""

import time

import pytest

from competence_gateway.dao.circuit_breaker import CircuitBreaker
from competence_gateway.exceptions import CircuitBreakerOpenError


class TestCircuitBreaker:
    """Tests for the CircuitBreaker resilience pattern."""

    def test_initial_state_is_closed(self):
        """New circuit breaker should start in CLOSED (allowing calls)."""
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == CircuitBreaker.CLOSED
        assert cb.failure_count == 0
        assert cb.can_execute() is True

    def test_stays_closed_under_threshold(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == CircuitBreaker.CLOSED
        assert cb.can_execute() is True

    def test_opens_at_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        for _ in range(3):
            cb.record_failure()
        assert cb.state == CircuitBreaker.OPEN

    def test_open_circuit_rejects_calls(self):
        """OPEN circuit should reject calls and report when they resume."""
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        cb.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            cb.can_execute()

        assert 1 <= exc_info.value.recovery_time <= 60
        assert exc_info.value.context["recovery_time"] == exc_info.value.recovery_time

    def test_success_resets_failure_count(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        cb.record_failure()
        cb.record_failure()
        assert cb.failure_count == 2

        cb.record_success()
        assert cb.failure_count == 0
        assert cb.state == CircuitBreaker.CLOSED

    def test_half_open_after_recovery_timeout(self):
        """After the timeout the next call is let through as a probe."""
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        assert cb.state == CircuitBreaker.OPEN

        time.sleep(0.01)
        assert cb.can_execute() is True
        assert cb.state == CircuitBreaker.HALF_OPEN

    def test_success_after_half_open_closes(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.can_execute()

        cb.record_success()
        assert cb.state == CircuitBreaker.CLOSED
        assert cb.failure_count == 0

    def test_failure_after_half_open_reopens(self):
        """A failed probe sends the circuit straight back to OPEN."""
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=0)
        for _ in range(3):
            cb.record_failure()
        cb.can_execute()
        assert cb.state == CircuitBreaker.HALF_OPEN

        cb.record_failure()
        assert cb.state == CircuitBreaker.OPEN

    def test_open_circuit_reports_rejection(self):
        cb = CircuitBreaker(failure_threshold=2, recovery_timeout=60)
        assert cb.is_rejecting is False
        assert cb.retry_in() == 0

        cb.record_failure()
        cb.record_failure()

        assert cb.is_rejecting is True
        assert 0 < cb.retry_in() <= 60

    def test_elapsed_timeout_is_not_rejecting(self):
        """Once the timeout passes, the next call goes through as a probe."""
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()

        assert cb.state == CircuitBreaker.OPEN
        assert cb.is_rejecting is False

    def test_rejection_names_the_dependency(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60, name="competence-api")
        cb.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            cb.can_execute()
        assert exc_info.value.context["dependency"] == "competence-api"

    def test_snapshot(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.can_execute()
        cb.record_failure()

        snapshot = cb.snapshot()

        assert snapshot["state"] == CircuitBreaker.OPEN
        assert snapshot["failure_count"] == 2
        assert snapshot["failure_threshold"] == 1
        assert snapshot["times_opened"] == 2
        assert snapshot["retry_in_seconds"] == 0
