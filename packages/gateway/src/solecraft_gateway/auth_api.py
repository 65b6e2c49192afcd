"""Auth endpoints: login, register, forgot-password, profile.

Form validation runs client-side first (the same rules the login and
register screens enforce), then the request goes through the session's
ApiClient. Expected failures come back as result objects with a user-facing
message; nothing here raises for a wrong password or a down server.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError
from solecraft_shared.auth_models import AuthResult, PasswordResetResult, UserProfile
from solecraft_shared.routes import (
    AUTH_FORGOT_PASSWORD,
    AUTH_LOGIN,
    AUTH_PROFILE,
    AUTH_REGISTER,
)

from solecraft_gateway.session import SessionManager

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MIN_PHONE_DIGITS = 10

CONNECTION_ERROR = "Unable to connect to server. Please check your connection."
TIMEOUT_ERROR = "Request timed out. Please try again."
SERVER_ERROR = "Server error. Please try again later."


def validate_email(email: str) -> str | None:
    if not email:
        return "Please enter your email"
    if "@" not in email:
        return "Please enter a valid email"
    return None


def validate_login(email: str, password: str) -> str | None:
    """Return an error message for the login form, or None if it's valid."""
    if not email or not password:
        return "Please fill in all fields"
    if "@" not in email:
        return "Please enter a valid email"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def validate_registration(name: str, email: str, phone: str, password: str) -> str | None:
    """Return an error message for the register form, or None if it's valid."""
    if not name or not email or not phone or not password:
        return "Please fill in all fields"
    if "@" not in email:
        return "Please enter a valid email"
    if len(re.sub(r"\D", "", phone)) < MIN_PHONE_DIGITS:
        return f"Please enter a valid phone number (minimum {MIN_PHONE_DIGITS} digits)"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def _body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def describe_error(error: Exception, fallback: str) -> str:
    """Turn a failed request into the message the UI shows.

    A ``message`` from the backend wins, verbatim. Otherwise timeouts,
    connection problems and 500s get their own wording; anything else gets
    ``fallback``.
    """
    if isinstance(error, httpx.HTTPStatusError):
        message = _body(error.response).get("message")
        if isinstance(message, str) and message:
            return message
        if error.response.status_code == 500:
            return SERVER_ERROR
        return fallback
    if isinstance(error, httpx.TimeoutException):
        return TIMEOUT_ERROR
    if isinstance(error, httpx.RequestError):
        return CONNECTION_ERROR
    return fallback


class AuthApi:
    """Calls /api/auth/* and keeps the session's credential store in sync."""

    def __init__(self, session: SessionManager) -> None:
        self.session = session

    def _store_credential(self, body: dict[str, Any], fallback: str) -> AuthResult:
        token = body.get("token")
        user = body.get("user") if isinstance(body.get("user"), dict) else None
        if token is not None and not self.session.login(token, user):
            return AuthResult(success=False, message="Server returned an invalid token")
        return AuthResult(
            success=True,
            message=body.get("message") or fallback,
            token=token,
            user=user,
        )

    async def login(self, email: str, password: str) -> AuthResult:
        error = validate_login(email, password)
        if error:
            return AuthResult(success=False, message=error)

        try:
            response = await self.session.client.post(
                AUTH_LOGIN, json={"email": email, "password": password}
            )
        except httpx.HTTPError as e:
            logger.warning(f"Login failed: {type(e).__name__}")
            return AuthResult(
                success=False, message=describe_error(e, "Login failed. Please try again.")
            )

        body = _body(response)
        if not body.get("success") or not body.get("token"):
            return AuthResult(
                success=False, message=body.get("message") or "Login failed. Please try again."
            )

        logger.info("Login succeeded")
        return self._store_credential(body, "Login successful")

    async def register(self, name: str, email: str, phone: str, password: str) -> AuthResult:
        error = validate_registration(name, email, phone, password)
        if error:
            return AuthResult(success=False, message=error)

        try:
            response = await self.session.client.post(
                AUTH_REGISTER,
                json={"name": name, "email": email, "phone": phone, "password": password},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Registration failed: {type(e).__name__}")
            return AuthResult(success=False, message=describe_error(e, "Registration failed"))

        body = _body(response)
        if not body.get("success"):
            return AuthResult(success=False, message=body.get("message") or "Registration failed")

        logger.info("Registration succeeded")
        return self._store_credential(body, "Registration successful")

    async def forgot_password(self, email: str) -> PasswordResetResult:
        error = validate_email(email)
        if error:
            return PasswordResetResult(success=False, message=error)

        try:
            response = await self.session.client.post(AUTH_FORGOT_PASSWORD, json={"email": email})
        except httpx.HTTPError as e:
            return PasswordResetResult(
                success=False, message=describe_error(e, "Failed to send reset link.")
            )

        body = _body(response)
        if not body.get("success"):
            return PasswordResetResult(
                success=False, message=body.get("message") or "Failed to send reset link."
            )

        return PasswordResetResult(
            success=True,
            message=body.get("message") or "Password reset link has been sent to your email!",
            reset_token=body.get("resetToken"),
        )

    async def fetch_profile(self) -> UserProfile | None:
        """Fetch the profile and refresh the cached copy. None on any failure."""
        token = self.session.store.load_token()
        if token is None:
            return None

        try:
            response = await self.session.client.get(AUTH_PROFILE)
        except httpx.HTTPError as e:
            logger.warning(f"Could not fetch profile: {type(e).__name__}")
            return None

        body = _body(response)
        if not body.get("success") or not isinstance(body.get("user"), dict):
            return None

        try:
            profile = UserProfile.model_validate(body["user"])
        except ValidationError as e:
            logger.warning(f"Profile response didn't match UserProfile: {e}")
            return None

        self.session.store.save(token, body["user"])
        return profile
