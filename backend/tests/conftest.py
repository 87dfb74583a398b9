"""
Competence Gateway - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The competence API is replaced by FakeCompetenceAPI behind an
       httpx.MockTransport; no network access is needed.

Fixture Hierarchy:
    ├── fake_api:    Scripted stand-in for the competence API
    ├── downstream:  DownstreamClient wired to fake_api, installed process-wide
    └── test_client: HTTPX AsyncClient talking to a fresh app through ASGI
"""

import os

# Settings are read at import time, so the environment is set first
os.environ["API_URL"] = "http://competence.test/api/"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"

from typing import Any, Dict, List, Optional, Tuple, Type  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from competence_gateway.dao import client as client_module  # noqa: E402
from competence_gateway.dao.circuit_breaker import CircuitBreaker  # noqa: E402
from competence_gateway.dao.client import DownstreamClient  # noqa: E402

API_URL = "http://competence.test/api/"
API_PREFIX = "/api/"

Reply = Tuple[int, Any, Optional[Type[Exception]]]


class FakeCompetenceAPI:
    """
    Scripted competence API.

    Replies are registered per (method, path) where path is relative to the
    API base ("skill/123"). Queued replies are consumed in order and the
    last one keeps answering. Every received request is recorded.

    Usage:
        fake_api.reply("POST", "customer", 200, {"_id": "1", "name": "Acme"})
        fake_api.fail("GET", "skill", httpx.ConnectError)
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def reply(self, method: str, path: str, status: int = 200, json: Any = None) -> "FakeCompetenceAPI":
        self.routes.setdefault((method.upper(), path), []).append((status, json, None))
        return self

    def fail(self, method: str, path: str, error: Type[Exception]) -> "FakeCompetenceAPI":
        self.routes.setdefault((method.upper(), path), []).append((0, None, error))
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]

        queue = self.routes.get((request.method, path))
        if not queue:
            raise AssertionError(f"Unexpected downstream call: {request.method} {request.url}")
        status, body, error = queue.pop(0) if len(queue) > 1 else queue[0]

        if error is not None:
            raise error("simulated transport failure", request=request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == API_PREFIX + path
        ]


@pytest.fixture
def fake_api() -> FakeCompetenceAPI:
    return FakeCompetenceAPI()


@pytest_asyncio.fixture
async def downstream(fake_api, monkeypatch):
    """
    DownstreamClient bound to fake_api, installed as the process-wide client.

    Retries are immediate and the circuit opens after three failed calls.
    """
    client = DownstreamClient(
        base_url=API_URL,
        transport=httpx.MockTransport(fake_api.handle),
        retry_attempts=3,
        retry_min_wait=0,
        retry_max_wait=0,
        circuit_breaker=CircuitBreaker(failure_threshold=3, recovery_timeout=60),
    )
    monkeypatch.setattr(client_module, "downstream_client", client)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def test_client(downstream):
    """
    Async HTTP client for endpoint tests.

    A fresh app per test keeps rate limiter state isolated.
    """
    from competence_gateway.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
