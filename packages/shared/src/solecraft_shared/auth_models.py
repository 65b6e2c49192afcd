"""Auth domain models: what the backend returns from /api/auth/*."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from solecraft_shared.models import PlatformResult


class UserProfile(BaseModel):
    """Cached profile record. Display only; the backend is authoritative."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    role: str | None = None


class AuthResult(PlatformResult):
    """Result of login / register."""

    token: str | None = None
    user: dict[str, Any] | None = None


class PasswordResetResult(PlatformResult):
    """Result of forgot-password. ``reset_token`` is only sent by dev backends."""

    reset_token: str | None = None
