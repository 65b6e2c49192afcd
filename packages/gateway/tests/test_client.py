"""Tests for ApiClient's middleware chain, with mocked HTTP."""

from __future__ import annotations

import httpx
import pytest
from solecraft_gateway.client import ApiClient
from solecraft_gateway.middleware import Middleware


class Recorder(Middleware):
    """Records every hook call into a shared log."""

    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log

    def on_request(self, request: httpx.Request) -> httpx.Request:
        self.log.append(f"{self.name}:request")
        request.headers[f"X-{self.name}"] = "1"
        return request

    def on_response(self, response: httpx.Response) -> httpx.Response:
        self.log.append(f"{self.name}:response")
        return response

    def on_error(self, request: httpx.Request, error: httpx.HTTPError) -> None:
        self.log.append(f"{self.name}:error:{type(error).__name__}")


class Exploding(Middleware):
    def on_error(self, request: httpx.Request, error: httpx.HTTPError) -> None:
        raise RuntimeError("middleware bug")


async def test_runs_middleware_in_order(settings, transport_factory) -> None:
    log: list[str] = []
    transport = transport_factory(httpx.Response(200, json={"success": True}))
    client = ApiClient(settings, [Recorder("a", log), Recorder("b", log)], transport=transport)

    response = await client.get("/api/services")

    assert response.json() == {"success": True}
    assert log == ["a:request", "b:request", "a:response", "b:response"]
    sent = transport.requests[0]
    assert sent.url == httpx.URL("https://api.solecraft.test/api/services")
    assert sent.headers["X-a"] == "1"
    assert sent.headers["X-b"] == "1"
    await client.close()


async def test_error_status_notifies_then_raises(settings, transport_factory) -> None:
    log: list[str] = []
    transport = transport_factory(httpx.Response(404, json={"message": "Product not found"}))
    client = ApiClient(settings, [Recorder("a", log)], transport=transport)

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await client.get("/api/products/missing")

    assert exc_info.value.response.status_code == 404
    assert log == ["a:request", "a:error:HTTPStatusError"]
    await client.close()


async def test_transport_failure_notifies_then_raises(settings, transport_factory) -> None:
    log: list[str] = []
    transport = transport_factory(httpx.ConnectError("connection refused"))
    client = ApiClient(settings, [Recorder("a", log)], transport=transport)

    with pytest.raises(httpx.ConnectError):
        await client.post("/api/cart/add", json={"productId": "p1"})

    assert log == ["a:request", "a:error:ConnectError"]
    await client.close()


async def test_redirect_status_is_not_an_error(settings, transport_factory) -> None:
    log: list[str] = []
    transport = transport_factory(httpx.Response(304))
    client = ApiClient(settings, [Recorder("a", log)], transport=transport)

    response = await client.get("/api/products")

    assert response.status_code == 304
    assert log == ["a:request", "a:response"]
    await client.close()


async def test_broken_error_hook_does_not_mask_original_error(settings, transport_factory) -> None:
    log: list[str] = []
    transport = transport_factory(httpx.Response(500))
    client = ApiClient(settings, [Exploding(), Recorder("a", log)], transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        await client.delete("/api/cart/remove/1")

    assert log == ["a:request", "a:error:HTTPStatusError"]
    await client.close()


async def test_context_manager_closes_client(settings, transport_factory) -> None:
    transport = transport_factory(httpx.Response(200, json={}))
    async with ApiClient(settings, transport=transport) as client:
        await client.put("/api/cart/update/1", json={"quantity": 2})
        assert client.request_count == 1
    assert client._client is None
