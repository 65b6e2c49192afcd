"""Navigation side effects.

The gateway never renders anything. When it needs to send the user somewhere
(logout, expired session) it calls ``Navigator.navigate`` and moves on; what
"navigate" means is up to whoever passed ``on_navigate`` in: a router, a CLI
prompt, or nothing at all.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from solecraft_shared.routes import AUTH_PAGES, HOME_PATH

logger = logging.getLogger(__name__)


def is_auth_page(path: str, auth_pages: Iterable[str] = AUTH_PAGES) -> bool:
    """True if ``path`` is (or is under) one of the authentication pages."""
    return any(page in path for page in auth_pages)


class Navigator:
    """Tracks the current page and fires navigation callbacks."""

    def __init__(
        self,
        current_path: str = HOME_PATH,
        on_navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.current_path = current_path
        self.on_navigate = on_navigate
        self.history: list[str] = []

    def navigate(self, destination: str) -> None:
        """Fire-and-forget navigation. Callback failures are logged, not raised."""
        self.history.append(destination)
        self.current_path = destination
        logger.info(f"Navigating to {destination}")
        if self.on_navigate is None:
            return
        try:
            self.on_navigate(destination)
        except Exception:
            logger.exception(f"Navigation callback failed for {destination}")
