"""
Unit tests for generation-based request cancellation.
"""
import asyncio

import pytest

from tests.conftest import TODO
from ucuptest import Cancelled
from ucuptest.cancellation import CancellationToken


class TestCancellationToken:

    def test_next_starts_a_fresh_generation(self):
        token = CancellationToken()
        token.cancel()
        fresh = token.next()

        assert token.cancelled
        assert not fresh.cancelled
        assert fresh.generation == token.generation + 1

    @pytest.mark.asyncio
    async def test_wait_returns_once_cancelled(self):
        token = CancellationToken()
        waiter = asyncio.ensure_future(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)


class TestCancelRequest:

    @pytest.mark.asyncio
    async def test_in_flight_request_resolves_as_cancelled(self, client, server):
        task = asyncio.create_task(client.get("/slow", description="slow"))
        await server.entered.wait()

        client.cancel_request()
        outcome = await asyncio.wait_for(task, timeout=1)

        assert isinstance(outcome, Cancelled)
        assert outcome.generation == 0
        assert outcome.description == "slow"
        assert client.results == []
        assert client.passed_count == 0
        assert client.failed_count == 0

    @pytest.mark.asyncio
    async def test_cancel_aborts_every_request_of_the_generation(self, client, server):
        tasks = [asyncio.create_task(client.get("/slow")) for _ in range(3)]
        await server.entered.wait()
        await asyncio.sleep(0.01)

        client.cancel_request()
        outcomes = await asyncio.wait_for(asyncio.gather(*tasks), timeout=1)

        assert all(isinstance(o, Cancelled) for o in outcomes)
        assert client.results == []

    @pytest.mark.asyncio
    async def test_requests_after_cancel_use_new_generation(self, client, server):
        task = asyncio.create_task(client.get("/slow"))
        await server.entered.wait()
        client.cancel_request()
        await task

        assert client.generation == 1
        assert await client.get("/todos/1") == TODO
        assert client.passed_count == 1
        assert len(client.results) == 1

    @pytest.mark.asyncio
    async def test_cancel_without_requests_only_bumps_generation(self, client):
        client.cancel_request()
        client.cancel_request()

        assert client.generation == 2
        assert client.results == []
