"""Pydantic base models shared across packages.

These are the contract types the gateway hands back to calling UI code.
Expected failures (bad credentials, validation errors, a backend that says
"no") come back as result objects so callers can branch on ``success``
without catching exceptions.
"""

from pydantic import BaseModel


class PlatformResult(BaseModel):
    """Standard result envelope returned by gateway operations."""

    success: bool
    message: str
    data: dict[str, str | int | float | bool | None] | None = None
