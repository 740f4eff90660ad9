"""
Client-local key/value storage.

Mirrors browser ``localStorage``: string keys, string values. The dashboard
only depends on two entries, ``token`` and ``user`` (a JSON-encoded profile).
``LocalStorage`` keeps them in memory; ``FileLocalStorage`` writes them to a
JSON file so a session survives a restart.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from finbins.integrations.contracts.interfaces import UserProfile
from finbins.integrations.policy.response_wrappers import SessionError

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class LocalStorage:
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    # --- raw key/value API ----------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    # --- session helpers ------------------------------------------------------

    def get_token(self) -> Optional[str]:
        return self.get_item(TOKEN_KEY) or None

    def get_user_profile(self) -> UserProfile:
        raw = self.get_item(USER_KEY)
        if not raw:
            raise SessionError()
        try:
            return UserProfile.model_validate(json.loads(raw))
        except (ValueError, TypeError) as exc:
            # pydantic's ValidationError is a ValueError
            logger.warning("Stored user profile is unreadable: %s", exc)
            raise SessionError() from exc

    def save_user_profile(self, profile: UserProfile) -> None:
        self.set_item(USER_KEY, json.dumps(profile.to_wire()))

    def save_session(self, token: str, profile: UserProfile) -> None:
        self.set_item(TOKEN_KEY, token)
        self.save_user_profile(profile)

    def clear_session(self) -> None:
        self.remove_item(TOKEN_KEY)
        self.remove_item(USER_KEY)


class FileLocalStorage(LocalStorage):
    """LocalStorage persisted to a JSON file after every write."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except ValueError:
                logger.warning("Ignoring corrupt storage file %s", self.path)
                data = {}
            if isinstance(data, dict):
                self._items = {str(k): str(v) for k, v in data.items()}

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._flush()

    def remove_item(self, key: str) -> None:
        super().remove_item(key)
        self._flush()

    def clear(self) -> None:
        super().clear()
        self._flush()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")


def open_storage(path: Optional[Union[str, Path]] = None) -> LocalStorage:
    """File-backed storage when a path is configured, in-memory otherwise."""
    if path:
        return FileLocalStorage(path)
    return LocalStorage()
