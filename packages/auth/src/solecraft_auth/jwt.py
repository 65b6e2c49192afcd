"""Client-side JWT payload inspection.

The UI uses this to read claims (``sub``, ``email``, ``exp``) out of the token
the backend issued. The signature is NOT verified here and must never be:
decoded claims are a display and expiry hint only. The backend is the sole
authority on whether a token is valid, and every request proves that again.

Policy for tokens the client can't fully read: a stored token is trusted until
the client can prove it expired. An undecodable (opaque) token and a token
without a usable ``exp`` claim are both treated as live; only a decodable,
numeric ``exp`` in the past ends the session locally.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any

from jwt.utils import base64url_decode

logger = logging.getLogger(__name__)


def decode_payload(token: str) -> dict[str, Any] | None:
    """Decode the payload segment of a compact token without verifying it.

    Args:
        token: The raw token string (``header.payload.signature``).

    Returns:
        The claims dict, or None if the token has no payload segment or any
        decoding step fails. Never raises.
    """
    if not isinstance(token, str):
        return None

    segments = token.split(".")
    if len(segments) < 2 or not segments[1]:
        return None

    try:
        raw = base64url_decode(segments[1])
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors;
        # pathologically nested JSON raises RecursionError
        logger.debug(f"Token payload is not decodable: {e}")
        return None

    if not isinstance(payload, dict):
        logger.debug(f"Token payload is a {type(payload).__name__}, not an object")
        return None
    return payload


def _exp_claim(payload: dict[str, Any] | None) -> float | None:
    if not payload:
        return None
    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return exp


def is_expired(payload: dict[str, Any] | None, now: float | None = None) -> bool:
    """True only if ``payload`` carries a numeric ``exp`` strictly before now.

    A missing payload or a missing/non-numeric ``exp`` means "does not expire".
    """
    exp = _exp_claim(payload)
    if exp is None:
        return False
    current = int(time.time()) if now is None else now
    return exp < current


def expires_at(payload: dict[str, Any] | None) -> datetime | None:
    """The ``exp`` claim as an aware UTC datetime, for display."""
    exp = _exp_claim(payload)
    if exp is None:
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
