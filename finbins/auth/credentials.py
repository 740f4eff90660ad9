"""
Session token classification.

Synthetic (demo) sessions carry tokens of the form
``dummy-token-<userId>-<timestampMillis>``; anything else is treated as an
opaque server-issued token. Parsing happens once, when a SessionContext is
built, and the context is passed around from there.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

SYNTHETIC_PREFIX = "dummy-token-"
DEFAULT_USER_ID = 1


def is_synthetic(token: Optional[str], prefix: str = SYNTHETIC_PREFIX) -> bool:
    return bool(token) and token.startswith(prefix)


def extract_user_id(token: Optional[str], prefix: str = SYNTHETIC_PREFIX, default: int = DEFAULT_USER_ID) -> int:
    """Return the user id embedded in a synthetic token, or ``default``.

    Malformed tokens never raise; they silently fall back to the default id.
    """
    if not is_synthetic(token, prefix):
        return default
    parts = token.split("-")
    if len(parts) < 3:
        return default
    try:
        return int(parts[2])
    except ValueError:
        return default


def make_synthetic_token(user_id: int, now_ms: Optional[int] = None, prefix: str = SYNTHETIC_PREFIX) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}{user_id}-{now_ms}"


@dataclass(frozen=True)
class SessionContext:
    is_synthetic: bool
    user_id: int
    raw_token: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return not self.raw_token

    @classmethod
    def from_token(
        cls,
        token: Optional[str],
        prefix: str = SYNTHETIC_PREFIX,
        default_user_id: int = DEFAULT_USER_ID,
    ) -> "SessionContext":
        if not token:
            return cls.anonymous(default_user_id)
        return cls(
            is_synthetic=is_synthetic(token, prefix),
            user_id=extract_user_id(token, prefix, default_user_id),
            raw_token=token,
        )

    @classmethod
    def anonymous(cls, default_user_id: int = DEFAULT_USER_ID) -> "SessionContext":
        return cls(is_synthetic=False, user_id=default_user_id, raw_token=None)
