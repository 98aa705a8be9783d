from __future__ import annotations

"""Identity store: one durable session id per local profile."""

import random
import sys
from datetime import datetime, timezone
from typing import Callable, Optional

from storage import KeyValueStore, StorageError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id(now: datetime) -> str:
    """`session-<epoch ms>-<random 0..999999>`."""
    millis = int(now.timestamp() * 1000)
    return f"session-{millis}-{random.randrange(1000000)}"


class IdentityStore:
    def __init__(self, storage: KeyValueStore, key: str, now: Callable[[], datetime] = utcnow) -> None:
        self.storage = storage
        self.key = key
        self.now = now
        self._cached: Optional[str] = None

    def get_or_create(self) -> str:
        """Return the stored id, creating and storing one when absent.

        Storage is a cache for identity: when it fails the id is still valid
        for the rest of this run.
        """
        if self._cached is not None:
            return self._cached
        stored: Optional[str] = None
        try:
            stored = self.storage.get_item(self.key)
        except StorageError as e:
            print(f"[WARN] Could not read session id: {e}", file=sys.stderr)
        if stored:
            self._cached = stored
            return stored
        return self._store(generate_session_id(self.now()))

    def regenerate(self) -> str:
        """Replace the current id with a brand-new one."""
        return self._store(generate_session_id(self.now()))

    def _store(self, session_id: str) -> str:
        self._cached = session_id
        try:
            self.storage.set_item(self.key, session_id)
        except StorageError as e:
            print(f"[WARN] Could not persist session id: {e}", file=sys.stderr)
        return session_id
