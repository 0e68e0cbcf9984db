"""
🧪 test_delivery_client.py — stale responses never overwrite newer ones

The API is faked with an async httpx.MockTransport handler so responses
can be released in any order.
"""

import asyncio

import httpx
import pytest

from menu_delivery.services.delivery import DeliveryEstimateClient


def estimate_body(fee: float, cep: str) -> dict:
    return {"fee": fee, "estimatedMinutes": 40, "cep": cep, "distanceKm": fee / 2, "perKm": 2.0}


@pytest.mark.asyncio
async def test_out_of_order_response_is_discarded():
    slow_started = asyncio.Event()
    release_slow = asyncio.Event()
    requests = []

    async def handler(request: httpx.Request) -> httpx.Response:
        cep = request.url.params["cep"]
        requests.append(cep)
        if cep == "01310-100":
            slow_started.set()
            await release_slow.wait()
            return httpx.Response(200, json=estimate_body(10.0, "01310-100"))
        return httpx.Response(200, json=estimate_body(20.0, "20040-020"))

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        slow = asyncio.create_task(client.request_estimate("checkout", "pizzaria-paulista", "01310-100"))
        await asyncio.wait_for(slow_started.wait(), timeout=1)

        fast = await client.request_estimate("checkout", "pizzaria-paulista", "20040-020")
        release_slow.set()
        stale = await slow

        assert fast is not None and fast.fee == 20.0
        assert stale is None
        assert client.latest("checkout").fee == 20.0
        assert client.latest("checkout").postal_code == "20040-020"
        assert requests == ["01310-100", "20040-020"]


@pytest.mark.asyncio
async def test_slots_do_not_discard_each_other():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=estimate_body(12.0, "20040-020"))

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        sidebar, checkout = await asyncio.gather(
            client.request_estimate("sidebar", "pizzaria-paulista", "20040020"),
            client.request_estimate("checkout", "pizzaria-paulista", "20040020"),
        )

        assert sidebar.ok and checkout.ok
        assert client.latest("sidebar") is sidebar
        assert client.latest("checkout") is checkout


@pytest.mark.asyncio
async def test_invalid_cep_is_rejected_locally_and_supersedes_pending():
    release = asyncio.Event()
    started = asyncio.Event()
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.params["cep"])
        started.set()
        await release.wait()
        return httpx.Response(200, json=estimate_body(20.0, "20040-020"))

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        pending = asyncio.create_task(client.request_estimate("checkout", "pizzaria-paulista", "20040020"))
        await asyncio.wait_for(started.wait(), timeout=1)

        invalid = await client.request_estimate("checkout", "pizzaria-paulista", "2004")
        release.set()

        assert await pending is None
        assert invalid.error == "Enter a CEP with 8 digits."
        assert invalid.status_code is None
        assert calls == ["20040020"]
        assert client.latest("checkout") is invalid


@pytest.mark.asyncio
async def test_error_body_message_is_surfaced():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={
            "success": False,
            "error": "Could not locate the CEP.",
            "detail": "coordinates_unavailable",
        })

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        outcome = await client.request_estimate("checkout", "pizzaria-paulista", "99999-999")

        assert not outcome.ok
        assert outcome.status_code == 422
        assert outcome.error == "Could not locate the CEP."
        assert outcome.fee is None


@pytest.mark.asyncio
async def test_network_failure_becomes_generic_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        outcome = await client.request_estimate("checkout", "pizzaria-paulista", "20040020")

        assert outcome.error == "Could not calculate delivery. Try again."
        assert outcome.status_code is None


@pytest.mark.asyncio
@pytest.mark.parametrize("status,body", [
    (502, ["bad gateway"]),
    (503, "service unavailable"),
    (400, {"error": None}),
    (200, [1, 2, 3]),
])
async def test_unexpected_body_shape_becomes_http_error(status, body):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    async with DeliveryEstimateClient("http://api.test", transport=httpx.MockTransport(handler)) as client:
        outcome = await client.request_estimate("checkout", "pizzaria-paulista", "20040020")

        assert not outcome.ok
        assert outcome.error == f"HTTP {status}"
        assert outcome.fee is None
