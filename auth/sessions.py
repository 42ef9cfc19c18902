"""
auth/sessions.py -- In-memory registry of the current token per user.

One SessionRegistry lives on app.state for the lifetime of the process and is
passed explicitly to the login/logout flow and the auth gate. Tests create
their own independent instances.

Semantics:
  set()   overwrites any earlier token for the same user id. The earlier token
          is forgotten here but stays cryptographically valid until expiry.
  clear() removes the entry; clearing an absent id is a no-op.

Whether an entry is required for a token to be accepted is decided by the
auth gate (Settings.enforce_sessions), not by this class.

Concurrency: sync route handlers run in a threadpool, so a single
threading.Lock guards the dict. Every operation under the lock is O(1) and
never does I/O -- callers hash passwords and query the store before touching
the registry.

Nothing here is persisted. A restart empties the registry.
"""

from __future__ import annotations

import hmac
import threading


class SessionRegistry:
    """Thread-safe map of user id -> most recently issued token.

    Usage:
        sessions = SessionRegistry()
        sessions.set(42, token)
        sessions.matches(42, token)  # True
        sessions.clear(42)
    """

    def __init__(self) -> None:
        self._tokens: dict[int, str] = {}
        self._lock = threading.Lock()

    def set(self, user_id: int, token: str) -> None:
        with self._lock:
            self._tokens[user_id] = token

    def clear(self, user_id: int) -> None:
        with self._lock:
            self._tokens.pop(user_id, None)

    def get(self, user_id: int) -> str | None:
        with self._lock:
            return self._tokens.get(user_id)

    def matches(self, user_id: int, token: str) -> bool:
        """Return True if token is the one currently recorded for user_id."""
        current = self.get(user_id)
        if current is None:
            return False
        return hmac.compare_digest(current.encode("utf-8"), token.encode("utf-8"))

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._tokens
