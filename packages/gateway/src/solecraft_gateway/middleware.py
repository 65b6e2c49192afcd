"""Request/response middleware applied by ApiClient.

Each middleware has a narrow contract and is tested on its own:

  - on_request(request) -> request   runs before the request is sent
  - on_response(response) -> response runs after a 2xx/3xx response
  - on_error(request, error)           runs after a 4xx/5xx or a transport
                                       failure; the client re-raises afterwards

Two middlewares make up the session pipeline:

  - BearerTokenMiddleware: injects ``Authorization: Bearer <token>``
  - ResponseGuardian: turns a 401 into "clear credentials + redirect to login"
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import httpx
from solecraft_auth.store import CredentialStore, is_valid_token
from solecraft_shared.routes import AUTH_PAGES, SESSION_EXPIRED_PATH, SILENT_ENDPOINTS

from solecraft_gateway.navigation import Navigator, is_auth_page

logger = logging.getLogger(__name__)


class Middleware:
    """Base middleware; every hook is a pass-through."""

    def on_request(self, request: httpx.Request) -> httpx.Request:
        return request

    def on_response(self, response: httpx.Response) -> httpx.Response:
        return response

    def on_error(self, request: httpx.Request, error: httpx.HTTPError) -> None:
        return None


@dataclass
class PipelineState:
    """Cross-request coordination state, owned by one SessionManager."""

    is_redirecting: bool = False


class BearerTokenMiddleware(Middleware):
    """Adds the stored token to every outbound request.

    Fail-open: if anything goes wrong reading the token, the request goes out
    without the header and the backend decides. Never does network I/O.
    """

    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def on_request(self, request: httpx.Request) -> httpx.Request:
        try:
            token = self.store.load_token()
            if is_valid_token(token):
                request.headers["Authorization"] = f"Bearer {token}"
        except Exception:
            logger.exception("Could not attach bearer token, sending request without it")
        return request


class ResponseGuardian(Middleware):
    """Enforces session invalidation on 401 responses.

    On a 401: clear the credential store and redirect to the login page with
    ``error=session_expired``, unless the user is already on an auth page.
    ``state.is_redirecting`` makes this idempotent across a burst of failing
    requests. Transport failures on silent endpoints are best-effort reads and
    never escalate. Every other error passes through uninterpreted.
    """

    def __init__(
        self,
        store: CredentialStore,
        navigator: Navigator,
        state: PipelineState | None = None,
        silent_endpoints: Iterable[str] = SILENT_ENDPOINTS,
        auth_pages: Iterable[str] = AUTH_PAGES,
    ) -> None:
        self.store = store
        self.navigator = navigator
        self.state = state if state is not None else PipelineState()
        self.silent_endpoints = tuple(silent_endpoints)
        self.auth_pages = tuple(auth_pages)

    def is_silent(self, request: httpx.Request) -> bool:
        path = request.url.path
        return any(endpoint in path for endpoint in self.silent_endpoints)

    def on_error(self, request: httpx.Request, error: httpx.HTTPError) -> None:
        if isinstance(error, httpx.HTTPStatusError):
            if error.response.status_code == 401:
                self._handle_unauthorized(request)
            return

        if self.is_silent(request):
            logger.debug(f"Ignoring {type(error).__name__} on {request.url.path}")
        else:
            logger.error(
                f"{request.method} {request.url.path} failed: {type(error).__name__}: {error}"
            )

    def _handle_unauthorized(self, request: httpx.Request) -> None:
        if self.state.is_redirecting:
            logger.debug(f"401 on {request.url.path} while already redirecting, skipping")
            return

        # Flag goes up before any other work so re-entrant calls see it
        self.state.is_redirecting = True
        try:
            if self.store.is_empty():
                logger.debug(f"401 on {request.url.path}, session already cleared")
            else:
                logger.info(f"401 on {request.method} {request.url.path}, clearing session")
                self.store.clear()
            if not is_auth_page(self.navigator.current_path, self.auth_pages):
                self.navigator.navigate(SESSION_EXPIRED_PATH)
        finally:
            self.state.is_redirecting = False
