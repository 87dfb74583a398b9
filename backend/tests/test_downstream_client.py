"""
Competence Gateway - Downstream Client & DAO Tests
==================================================

What:  Tests for DownstreamClient (retry, circuit breaker, request IDs)
       and the request shapes produced by ResourceDAO.
How:   FakeCompetenceAPI scripts transport failures and replies.

What we test:
    ✅ Connect errors are retried and a later success is returned
    ✅ Exhausted retries raise DownstreamUnavailableError
    ✅ Repeated failures open the circuit; calls then fail fast
    ✅ POST is not resent after a read timeout, GET is
    ✅ X-Request-ID is forwarded downstream
    ✅ DAO paths, query strings and bodies
"""

import json

import httpx
import pytest

from competence_gateway.dao.circuit_breaker import CircuitBreaker
from competence_gateway.dao.client import is_retryable
from competence_gateway.dao.resource import ResourceDAO
from competence_gateway.exceptions import (
    CircuitBreakerOpenError,
    DownstreamUnavailableError,
    NotFoundError,
)
from competence_gateway.middleware.request_id import request_id_var


class TestRetryPolicy:

    def test_connect_errors_are_always_retryable(self):
        request = httpx.Request("POST", "http://competence.test/api/skill")
        assert is_retryable(httpx.ConnectError("refused", request=request))
        assert is_retryable(httpx.PoolTimeout("busy", request=request))

    def test_read_timeout_only_for_idempotent_methods(self):
        post = httpx.Request("POST", "http://competence.test/api/skill")
        get = httpx.Request("GET", "http://competence.test/api/skill")
        assert not is_retryable(httpx.ReadTimeout("slow", request=post))
        assert is_retryable(httpx.ReadTimeout("slow", request=get))

    def test_other_errors_are_not_retried(self):
        assert not is_retryable(ValueError("nope"))
        assert not is_retryable(httpx.ReadTimeout("slow"))


class TestDownstreamClient:

    @pytest.mark.asyncio
    async def test_connect_error_then_success(self, downstream, fake_api):
        """A transient connect error is retried transparently."""
        fake_api.fail("GET", "skill", httpx.ConnectError)
        fake_api.reply("GET", "skill", 200, [{"_id": "1"}])

        response = await downstream.request("GET", "skill")

        assert response.status_code == 200
        assert len(fake_api.calls("GET", "skill")) == 2
        assert downstream.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_unavailable(self, downstream, fake_api):
        fake_api.fail("GET", "skill", httpx.ConnectError)

        with pytest.raises(DownstreamUnavailableError) as exc_info:
            await downstream.request("GET", "skill")

        assert len(fake_api.calls("GET", "skill")) == 3
        assert exc_info.value.retry_after == 60
        assert exc_info.value.context["error_type"] == "ConnectError"
        assert downstream.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_http_errors_are_not_retried(self, downstream, fake_api):
        """Any HTTP status is a completed round trip, even a 500."""
        fake_api.reply("GET", "skill", 500)

        response = await downstream.request("GET", "skill")

        assert response.status_code == 500
        assert len(fake_api.calls("GET", "skill")) == 1
        assert downstream.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_post_not_resent_after_read_timeout(self, downstream, fake_api):
        fake_api.fail("POST", "customer", httpx.ReadTimeout)

        with pytest.raises(DownstreamUnavailableError):
            await downstream.request("POST", "customer", json={"name": "Acme"})

        assert len(fake_api.calls("POST", "customer")) == 1

    @pytest.mark.asyncio
    async def test_get_resent_after_read_timeout(self, downstream, fake_api):
        fake_api.fail("GET", "customer", httpx.ReadTimeout)
        fake_api.reply("GET", "customer", 200, [])

        response = await downstream.request("GET", "customer")

        assert response.status_code == 200
        assert len(fake_api.calls("GET", "customer")) == 2

    @pytest.mark.asyncio
    async def test_circuit_opens_after_repeated_failures(self, downstream, fake_api):
        """Three failed calls open the circuit; the fourth never reaches the API."""
        fake_api.fail("GET", "office", httpx.ConnectError)

        for _ in range(3):
            with pytest.raises(DownstreamUnavailableError):
                await downstream.request("GET", "office")
        assert downstream.circuit_breaker.state == CircuitBreaker.OPEN

        sent = len(fake_api.requests)
        with pytest.raises(CircuitBreakerOpenError):
            await downstream.request("GET", "office")
        assert len(fake_api.requests) == sent

    @pytest.mark.asyncio
    async def test_request_id_is_forwarded(self, downstream, fake_api):
        fake_api.reply("GET", "skill", 200, [])

        token = request_id_var.set("trace-42")
        try:
            await downstream.request("GET", "skill")
        finally:
            request_id_var.reset(token)

        assert fake_api.requests[-1].headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_request_id_generated_outside_requests(self, downstream, fake_api):
        fake_api.reply("GET", "skill", 200, [])

        await downstream.request("GET", "skill")

        assert len(fake_api.requests[-1].headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_ping(self, downstream, fake_api):
        fake_api.reply("GET", "", 404)
        assert await downstream.ping() is True

    @pytest.mark.asyncio
    async def test_ping_unreachable(self, downstream, fake_api):
        fake_api.fail("GET", "", httpx.ConnectError)
        assert await downstream.ping() is False


class TestResourceDAO:

    @pytest.mark.asyncio
    async def test_create_posts_item(self, downstream, fake_api):
        fake_api.reply("POST", "skillGroup", 200, {"_id": "g1", "name": "Languages"})
        dao = ResourceDAO("skillGroup")

        created = await dao.create({"name": "Languages"})

        assert created == {"_id": "g1", "name": "Languages"}
        sent = fake_api.calls("POST", "skillGroup")[0]
        assert json.loads(sent.content) == {"name": "Languages"}

    @pytest.mark.asyncio
    async def test_get_many_forwards_query(self, downstream, fake_api):
        fake_api.reply("GET", "user", 200, [{"_id": "u1"}])
        dao = ResourceDAO("user")

        users = await dao.get_many({"email": "ada@example.com", "name": None})

        assert users == [{"_id": "u1"}]
        params = fake_api.calls("GET", "user")[0].url.params
        assert params["email"] == "ada@example.com"
        assert "name" not in params

    @pytest.mark.asyncio
    async def test_get_many_without_query(self, downstream, fake_api):
        fake_api.reply("GET", "office", 200, [])

        assert await ResourceDAO("office").get_many() == []
        assert fake_api.calls("GET", "office")[0].url.query == b""

    @pytest.mark.asyncio
    async def test_update_puts_to_item_path(self, downstream, fake_api):
        fake_api.reply("PUT", "user/u1", 204)

        await ResourceDAO("user").update("u1", {"email": "a@b.c", "name": "A"})

        assert len(fake_api.calls("PUT", "user/u1")) == 1

    @pytest.mark.asyncio
    async def test_delete_missing_item(self, downstream, fake_api):
        fake_api.reply("DELETE", "office/o9", 404)

        with pytest.raises(NotFoundError) as exc_info:
            await ResourceDAO("office").delete("o9")

        assert exc_info.value.resource == "office"
        assert exc_info.value.resource_id == "o9"

    @pytest.mark.asyncio
    async def test_explicit_client_is_used(self, downstream, fake_api):
        fake_api.reply("GET", "role/r1", 200, {"_id": "r1"})
        dao = ResourceDAO("role", client=downstream)

        assert dao.client is downstream
        assert await dao.get_by_id("r1") == {"_id": "r1"}
