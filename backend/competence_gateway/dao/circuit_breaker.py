"""
Competence Gateway - Circuit Breaker
====================================

What:  Guards the downstream API against request pile-ups while it is down.
How:   Counts consecutive transport failures reported by DownstreamClient and
       rejects calls instantly once the threshold is reached.
Who:   Driven by DownstreamClient; read by the /health route via snapshot().

State Machine:
    CLOSED ──(threshold transport failures)──→ OPEN
    OPEN ──(recovery_timeout elapsed, next call)──→ HALF_OPEN
    HALF_OPEN ──(round trip completes)──→ CLOSED
    HALF_OPEN ──(transport failure)──→ OPEN (timer restarts)

Any HTTP status counts as a completed round trip; only transport failures
move the breaker towards OPEN.
"""

import logging
import time
from typing import Any, Dict, Optional

from competence_gateway.exceptions import CircuitBreakerOpenError

logger = logging.getLogger(__name__)


class CircuitBreaker:
    """
    Circuit breaker for one downstream dependency.

    Args:
        failure_threshold: Consecutive transport failures before opening
        recovery_timeout:  Seconds an open circuit rejects calls
        name:              Dependency name used in log lines

    Plain counters; safe for a single-process asyncio server.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: int = 30,
        name: str = "competence-api",
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.name = name
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None
        self.times_opened = 0

    def retry_in(self) -> float:
        """Seconds until an open circuit lets the next call through; 0 otherwise."""
        if self.state != self.OPEN:
            return 0.0
        elapsed = time.monotonic() - (self.last_failure_time or 0)
        return max(self.recovery_timeout - elapsed, 0.0)

    @property
    def is_rejecting(self) -> bool:
        """True while calls would fail fast without reaching the API."""
        return self.retry_in() > 0

    def can_execute(self) -> bool:
        """
        Check if a request may be sent downstream.

        An open circuit whose recovery timeout has elapsed moves to HALF_OPEN
        and lets the call through as a probe.

        Raises:
            CircuitBreakerOpenError: circuit is open; carries whole seconds
                until the next probe (at least 1).
        """
        if self.state != self.OPEN:
            return True

        remaining = self.retry_in()
        if remaining > 0:
            raise CircuitBreakerOpenError(
                recovery_time=max(int(remaining), 1),
                context={"dependency": self.name},
            )

        logger.info("Circuit for %s HALF_OPEN, probing with next call", self.name)
        self.state = self.HALF_OPEN
        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Circuit for %s CLOSED, downstream recovered", self.name)
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None

    def record_failure(self) -> None:
        """Record a transport failure. May open the circuit."""
        self.failure_count += 1
        self.last_failure_time = time.monotonic()

        if self.state == self.HALF_OPEN:
            logger.warning("Circuit for %s back to OPEN, probe failed", self.name)
            self._open()
        elif self.state == self.CLOSED and self.failure_count >= self.failure_threshold:
            logger.warning(
                "Circuit for %s OPEN after %d consecutive failures",
                self.name,
                self.failure_count,
            )
            self._open()

    def _open(self) -> None:
        self.state = self.OPEN
        self.times_opened += 1

    def snapshot(self) -> Dict[str, Any]:
        """Current state for health reporting."""
        return {
            "state": self.state,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "retry_in_seconds": round(self.retry_in(), 1),
            "times_opened": self.times_opened,
        }
