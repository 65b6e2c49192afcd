"""Credential store: the persisted ``token`` and cached ``user`` profile.

Wraps a small key-value storage backend the same way browser local storage
works: string keys, string values, scoped to one API origin.

  - MemoryStorage: process-local dict (tests, throwaway sessions)
  - FileStorage: JSON file on disk, one namespace per origin (CLI, scripts)

The CredentialStore sits on top and tolerates whatever it finds there. Earlier
clients sometimes persisted the literal strings "null" / "undefined", and a
hand-edited file can hold anything. Reads degrade to "no credential", they
never raise.

Usage:
    store = CredentialStore(FileStorage(settings.storage_path, settings.origin))
    store.save(token, user)
    store.load_token()
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel
from solecraft_shared.routes import TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)

# Values left behind by serializing a missing JS value
SENTINEL_VALUES = frozenset({"null", "undefined"})


def is_valid_token(token: Any) -> bool:
    """True for a non-empty string that isn't one of the sentinel values."""
    if not isinstance(token, str):
        return False
    stripped = token.strip()
    return bool(stripped) and stripped not in SENTINEL_VALUES


class KeyValueStorage(Protocol):
    """Minimal string key-value interface the credential store needs."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-memory storage. Stores data in a plain dict so tests can assert on it."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """JSON-file storage, namespaced by origin.

    File layout: ``{"<origin>": {"token": "...", "user": "..."}}``. A missing or
    corrupt file reads as empty; the next write replaces it.
    """

    def __init__(self, path: Path | str, namespace: str = "default") -> None:
        self.path = Path(path)
        self.namespace = namespace

    def _read_all(self) -> dict[str, dict[str, str]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Could not read credential storage {self.path}: {e}")
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Credential storage {self.path} is corrupt, treating as empty")
            return {}

        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, dict)}

    def _write_all(self, data: dict[str, dict[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        # Owner-only: the file holds a bearer token
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2))
        os.chmod(tmp, 0o600)
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(self.namespace, {}).get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data.setdefault(self.namespace, {})[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        scope = data.get(self.namespace)
        if not scope or key not in scope:
            return
        del scope[key]
        if not scope:
            del data[self.namespace]
        self._write_all(data)


class CredentialStore:
    """Get/set/clear for the persisted token and cached user profile."""

    def __init__(self, storage: KeyValueStorage | None = None) -> None:
        self.storage: KeyValueStorage = storage if storage is not None else MemoryStorage()

    def save(self, token: str, user: dict[str, Any] | BaseModel | None = None) -> bool:
        """Persist a credential. Returns False (and stores nothing) for an invalid token."""
        if not is_valid_token(token):
            logger.warning("Refusing to store an empty or sentinel token")
            return False

        self.storage.set_item(TOKEN_KEY, token)
        if user is not None:
            if isinstance(user, BaseModel):
                user = user.model_dump()
            self.storage.set_item(USER_KEY, json.dumps(user))
        return True

    def clear(self) -> None:
        """Remove token and user. Safe to call when nothing is stored."""
        for key in (TOKEN_KEY, USER_KEY):
            try:
                self.storage.remove_item(key)
            except OSError as e:
                logger.error(f"Failed to remove '{key}' from credential storage: {e}")

    def load_token(self) -> str | None:
        token = self.storage.get_item(TOKEN_KEY)
        return token if is_valid_token(token) else None

    def load_user(self) -> dict[str, Any] | None:
        raw = self.storage.get_item(USER_KEY)
        if not raw or raw.strip() in SENTINEL_VALUES:
            return None
        try:
            user = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Cached user profile is corrupt, ignoring it")
            return None
        return user if isinstance(user, dict) else None

    def has_token(self) -> bool:
        return self.load_token() is not None

    def is_empty(self) -> bool:
        """True when neither key is present at all, sentinels included."""
        return all(self.storage.get_item(key) is None for key in (TOKEN_KEY, USER_KEY))

    def cleanup_invalid(self) -> bool:
        """Clear storage if it holds an empty or sentinel token. Returns True if cleared."""
        token = self.storage.get_item(TOKEN_KEY)
        if token is not None and not is_valid_token(token):
            logger.info("Removing invalid token left in credential storage")
            self.clear()
            return True
        return False
