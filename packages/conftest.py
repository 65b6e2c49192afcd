"""Shared test fixtures for the SoleCraft packages.

Provides:
  - Mock HTTP transport for httpx (intercepts all requests)
  - A JWT factory (PyJWT) for tokens with arbitrary claims
  - In-memory credential store, navigator and a wired SessionManager
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx
import jwt as pyjwt
import pytest
from solecraft_auth.store import CredentialStore, MemoryStorage
from solecraft_gateway.navigation import Navigator
from solecraft_gateway.session import SessionManager
from solecraft_shared.config import GatewaySettings

SECRET = "solecraft-test-secret"
BASE_URL = "https://api.solecraft.test"


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Usage:
        transport = MockTransport(responses=[
            httpx.Response(200, json={"success": True}),
            httpx.ConnectError("connection refused"),
        ])

    Each call to handle_async_request pops the next item from the list. An
    exception item is raised instead of returned, to simulate transport
    failures. If the list is exhausted, returns a 500 error.
    """

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            item.stream = httpx.ByteStream(item.content)
            return item
        return httpx.Response(500, json={"message": "No more mock responses"})


def make_token(
    sub: str = "user-123",
    email: str = "a@b.com",
    exp: int | None = None,
    **extra: Any,
) -> str:
    """Build a signed JWT with SoleCraft-shaped claims. ``exp=None`` → one hour out."""
    payload: dict[str, Any] = {
        "sub": sub,
        "email": email,
        "role": "customer",
        "exp": exp if exp is not None else int(time.time()) + 3600,
        **extra,
    }
    return pyjwt.encode(payload, SECRET, algorithm="HS256")


@pytest.fixture
def token_factory() -> Callable[..., str]:
    return make_token


@pytest.fixture
def transport_factory() -> Callable[..., MockTransport]:
    def factory(*responses: httpx.Response | Exception) -> MockTransport:
        return MockTransport(responses=list(responses))

    return factory


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(base_url=BASE_URL, timeout=5.0)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> CredentialStore:
    return CredentialStore(storage)


@pytest.fixture
def navigator() -> Navigator:
    return Navigator(current_path="/shop")


@pytest.fixture
def make_session(
    store: CredentialStore, navigator: Navigator, settings: GatewaySettings
) -> Callable[..., SessionManager]:
    """Build a SessionManager over the shared store/navigator with mocked HTTP."""

    def factory(*responses: httpx.Response | Exception) -> SessionManager:
        return SessionManager(
            store=store,
            navigator=navigator,
            settings=settings,
            transport=MockTransport(responses=list(responses)),
        )

    return factory
