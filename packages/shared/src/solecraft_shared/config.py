"""Gateway settings and API base-URL resolution.

Handles the three base-URL modes transparently:

1. **Explicit override**: ``SOLECRAFT_API_BASE_URL`` wins whenever it is set.

2. **Local dev**: ``SOLECRAFT_ENV=development`` (or ``local``) points at the
   backend started with ``npm run dev`` on ``localhost:5000``.

3. **Production**: everything else talks to the hosted backend.

The calling code doesn't need to know which mode it's in; it just calls
``load_settings()`` and gets a ready-to-use ``GatewaySettings``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel

from solecraft_shared.routes import AUTH_PAGES, SILENT_ENDPOINTS

PRODUCTION_BASE_URL = "https://sole-craft-backend.vercel.app"
LOCAL_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STORAGE_PATH = Path.home() / ".solecraft" / "storage.json"

_LOCAL_ENVS = {"development", "dev", "local"}


class GatewaySettings(BaseModel):
    """Everything the gateway needs to reach the backend."""

    base_url: str = PRODUCTION_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    silent_endpoints: tuple[str, ...] = SILENT_ENDPOINTS
    auth_pages: tuple[str, ...] = AUTH_PAGES
    storage_path: Path = DEFAULT_STORAGE_PATH

    @property
    def origin(self) -> str:
        """scheme://host[:port] of the base URL, used as the storage namespace."""
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"


def resolve_base_url(environ: Mapping[str, str] | None = None) -> str:
    """Pick the API base URL: explicit override > local dev > production."""
    env = os.environ if environ is None else environ

    override = env.get("SOLECRAFT_API_BASE_URL", "").strip()
    if override:
        return override.rstrip("/")

    if env.get("SOLECRAFT_ENV", "").strip().lower() in _LOCAL_ENVS:
        return LOCAL_BASE_URL

    return PRODUCTION_BASE_URL


def load_settings(environ: Mapping[str, str] | None = None) -> GatewaySettings:
    """Build GatewaySettings from environment variables.

    Raises:
        ValueError: SOLECRAFT_TIMEOUT is set but isn't a positive number.
    """
    env = os.environ if environ is None else environ

    timeout = DEFAULT_TIMEOUT
    raw_timeout = env.get("SOLECRAFT_TIMEOUT", "").strip()
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"SOLECRAFT_TIMEOUT must be a number of seconds, got '{raw_timeout}'"
            ) from None
        if timeout <= 0:
            raise ValueError(f"SOLECRAFT_TIMEOUT must be positive, got {timeout}")

    storage_path = DEFAULT_STORAGE_PATH
    raw_path = env.get("SOLECRAFT_STORAGE_PATH", "").strip()
    if raw_path:
        storage_path = Path(raw_path).expanduser()

    return GatewaySettings(
        base_url=resolve_base_url(env),
        timeout=timeout,
        storage_path=storage_path,
    )
