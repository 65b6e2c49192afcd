"""HTTP client wrapper with an explicit middleware chain.

Every call to the backend goes through ApiClient.request:

  1. build the request against the configured base URL
  2. run each middleware's on_request, in order
  3. send it
  4. 2xx/3xx → run each on_response, in order, return the response
  5. 4xx/5xx or transport failure → run each on_error, in order, re-raise

The caller always sees the original error (httpx.HTTPStatusError or an
httpx.RequestError subclass). Middleware can add side effects, not swallow
failures.

Usage:
    async with ApiClient(settings, middleware=[BearerTokenMiddleware(store)]) as api:
        response = await api.get("/api/services")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from solecraft_shared.config import GatewaySettings

from solecraft_gateway.middleware import Middleware

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin async wrapper over httpx.AsyncClient that applies middleware."""

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        middleware: Sequence[Middleware] = (),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or GatewaySettings()
        self.middleware: list[Middleware] = list(middleware)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.request_count: int = 0

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _notify_error(self, request: httpx.Request, error: httpx.HTTPError) -> None:
        for mw in self.middleware:
            try:
                mw.on_error(request, error)
            except Exception:
                logger.exception(f"{type(mw).__name__}.on_error failed")

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request through the middleware chain."""
        client = self._get_client()
        request = client.build_request(method, url, **kwargs)
        for mw in self.middleware:
            request = mw.on_request(request)

        self.request_count += 1
        try:
            response = await client.send(request)
        except httpx.RequestError as e:
            self._notify_error(request, e)
            raise

        if response.is_error:
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                self._notify_error(request, e)
                raise

        for mw in self.middleware:
            response = mw.on_response(response)
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
