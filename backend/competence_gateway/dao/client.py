"""
Competence Gateway - Downstream HTTP Client
===========================================

What:  The single gateway to the downstream competence API.
How:   Wraps one pooled httpx.AsyncClient with tenacity retries for transport
       failures and a circuit breaker that fails fast while the API is down.
Who:   Used by every ResourceDAO; closed by the application lifespan.

Error Handling Chain:
    Transport error → tenacity retries (exponential backoff + jitter)
    → All retries fail → record circuit breaker failure
    → DownstreamUnavailableError (503)
    → Threshold reached → later calls rejected instantly (CircuitBreakerOpenError)

    HTTP responses of any status count as a successful round trip; their
    meaning is decided by the translators in responses.py.

Retry Policy:
    Connect errors and pool timeouts never reached the API, so every method
    retries them. Read timeouts and dropped connections are retried only for
    idempotent methods (GET, PUT, DELETE); a POST may already have created
    the item.
"""

import logging
import time
import uuid
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from competence_gateway.config import settings
from competence_gateway.dao.circuit_breaker import CircuitBreaker
from competence_gateway.exceptions import DownstreamUnavailableError
from competence_gateway.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "PUT", "DELETE"})

_ALWAYS_RETRYABLE = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)
_IDEMPOTENT_RETRYABLE = (httpx.ReadTimeout, httpx.WriteTimeout, httpx.RemoteProtocolError, httpx.ReadError)


def is_retryable(exc: BaseException) -> bool:
    """Decide whether a failed attempt may be sent again."""
    if isinstance(exc, _ALWAYS_RETRYABLE):
        return True
    if isinstance(exc, _IDEMPOTENT_RETRYABLE):
        try:
            return exc.request.method in IDEMPOTENT_METHODS
        except RuntimeError:
            # request not attached to the exception
            return False
    return False


class DownstreamClient:
    """
    Pooled, retrying, circuit-protected client for the downstream API.

    The underlying httpx.AsyncClient is created lazily on first use so the
    module-level instance can be imported without an event loop.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_connections: Optional[int] = None,
        retry_attempts: Optional[int] = None,
        retry_min_wait: Optional[float] = None,
        retry_max_wait: Optional[float] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.api_url
        self.timeout = timeout if timeout is not None else settings.downstream_timeout
        self.max_connections = max_connections or settings.downstream_max_connections
        self.retry_attempts = retry_attempts or settings.retry_max_attempts
        self.retry_min_wait = (
            retry_min_wait if retry_min_wait is not None else settings.retry_min_wait
        )
        self.retry_max_wait = (
            retry_max_wait if retry_max_wait is not None else settings.retry_max_wait
        )
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                limits=httpx.Limits(max_connections=self.max_connections),
                transport=self._transport,
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
    ) -> httpx.Response:
        """
        Send one logical request to the downstream API.

        Args:
            method: HTTP verb
            path:   Path relative to the base URL (e.g. "skill/123")
            params: Query parameters (dict or list of pairs)
            json:   JSON-serializable request body

        Returns:
            The httpx.Response, whatever its status code.

        Raises:
            CircuitBreakerOpenError: Circuit is open (too many recent failures)
            DownstreamUnavailableError: Transport failed on every attempt
        """
        method = method.upper()
        request_id = request_id_var.get("") or str(uuid.uuid4())[:8]

        self.circuit_breaker.can_execute()

        try:
            response = await self._send_with_retry(method, path, params, json, request_id)
        except httpx.TransportError as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] %s %s failed: %s: %s",
                request_id,
                method,
                path,
                type(e).__name__,
                str(e),
            )
            raise DownstreamUnavailableError(
                retry_after=self.circuit_breaker.recovery_timeout,
                context={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "error_type": type(e).__name__,
                },
            ) from e

        self.circuit_breaker.record_success()
        return response

    async def _send_with_retry(
        self,
        method: str,
        path: str,
        params: Any,
        json: Any,
        request_id: str,
    ) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_retryable),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry_min_wait,
                max=self.retry_max_wait,
                jitter=self.retry_min_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                start_time = time.perf_counter()
                response = await self.http.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers={"X-Request-ID": request_id},
                )
                logger.debug(
                    "[%s] %s %s -> %d in %.1fms",
                    request_id,
                    method,
                    path,
                    response.status_code,
                    (time.perf_counter() - start_time) * 1000,
                )
        return response

    async def ping(self) -> bool:
        """
        Check whether the downstream API answers at all.

        Any HTTP response counts as reachable. No retries and no circuit
        breaker bookkeeping; used by the health check only.
        """
        try:
            await self.http.get("", timeout=min(self.timeout, 5.0))
            return True
        except httpx.HTTPError as e:
            logger.warning("Downstream ping failed: %s", str(e))
            return False

    async def aclose(self) -> None:
        """Close pooled connections. Called during application shutdown."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None


# Shared by all DAOs: holds the connection pool and the circuit breaker state
downstream_client = DownstreamClient()


def get_downstream_client() -> DownstreamClient:
    """Return the process-wide client (looked up at call time)."""
    return downstream_client
