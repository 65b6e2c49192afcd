"""Session facade: the public auth API the rest of the client calls.

One SessionManager is built at startup and passed to whatever needs it. It
owns the credential store, the navigator, and the pipeline state the Response
Guardian coordinates through, and lazily builds the ApiClient that carries the
session middleware:

    session = SessionManager(store=CredentialStore(FileStorage(...)))
    session.login(token, user)
    if await session.verify_token():
        ...
    session.logout()
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel
from solecraft_auth.jwt import decode_payload, is_expired
from solecraft_auth.store import CredentialStore, is_valid_token
from solecraft_shared.config import GatewaySettings
from solecraft_shared.routes import AUTH_VERIFY, LOGIN_PATH

from solecraft_gateway.client import ApiClient
from solecraft_gateway.middleware import BearerTokenMiddleware, PipelineState, ResponseGuardian
from solecraft_gateway.navigation import Navigator

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the credential lifecycle and the HTTP pipeline that enforces it."""

    def __init__(
        self,
        store: CredentialStore | None = None,
        navigator: Navigator | None = None,
        settings: GatewaySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store if store is not None else CredentialStore()
        self.navigator = navigator if navigator is not None else Navigator()
        self.settings = settings or GatewaySettings()
        self.state = PipelineState()
        self._transport = transport
        self._client: ApiClient | None = None

    @property
    def client(self) -> ApiClient:
        """The ApiClient every backend call should go through."""
        if self._client is None:
            self._client = ApiClient(
                self.settings,
                middleware=[
                    BearerTokenMiddleware(self.store),
                    ResponseGuardian(
                        self.store,
                        self.navigator,
                        self.state,
                        silent_endpoints=self.settings.silent_endpoints,
                        auth_pages=self.settings.auth_pages,
                    ),
                ],
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def __aenter__(self) -> SessionManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def is_authenticated(self) -> bool:
        """True unless there's no token or the token provably expired.

        An expired token is cleared from storage as a side effect.
        """
        token = self.store.load_token()
        if token is None:
            return False

        if is_expired(decode_payload(token)):
            logger.info("Stored token has expired, clearing session")
            self.store.clear()
            return False
        return True

    def get_current_user(self) -> dict[str, Any] | None:
        """Claims from the stored token (not the cached profile), or None."""
        token = self.store.load_token()
        if token is None:
            return None
        return decode_payload(token)

    def get_user_data(self) -> dict[str, Any] | None:
        """The cached user profile saved at login, or None."""
        return self.store.load_user()

    def login(self, token: str, user: dict[str, Any] | BaseModel | None = None) -> bool:
        if not is_valid_token(token):
            logger.error("Invalid token provided to login")
            return False
        return self.store.save(token, user)

    def logout(self) -> None:
        self.store.clear()
        self.navigator.navigate(LOGIN_PATH)

    def cleanup_invalid_tokens(self) -> bool:
        return self.store.cleanup_invalid()

    async def verify_token(self) -> bool:
        """Ask the backend whether the stored token is still good.

        No network call when there's no live token locally. A 401 logs the
        user out; any other failure just reports False.
        """
        if not self.is_authenticated():
            return False

        try:
            response = await self.client.post(AUTH_VERIFY)
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Token verification failed: HTTP {e.response.status_code}")
            if e.response.status_code == 401:
                self.logout()
            return False
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Token verification failed: {e}")
            return False

        return isinstance(body, dict) and bool(body.get("success"))
