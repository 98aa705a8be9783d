from __future__ import annotations

"""Metrics store: authoritative counters and the per-challenge log.

Every mutation builds a new frozen MetricsState and writes the whole
document before returning. A missing or malformed stored document is treated
as absent.
"""

import sys
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from storage import KeyValueStore, StorageError

from ..app.explain import trace as xtrace
from .identity import IdentityStore, utcnow
from .schema import ChallengeId, ChallengeRecord, MetricsSnapshot, MetricsState


class MetricsStore:
    def __init__(
        self,
        storage: KeyValueStore,
        key: str,
        identity: IdentityStore,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.storage = storage
        self.key = key
        self.identity = identity
        self.now = now
        self._state: Optional[MetricsState] = None

    @property
    def state(self) -> MetricsState:
        if self._state is None:
            return self.load()
        return self._state

    def _read(self) -> Optional[MetricsState]:
        try:
            raw = self.storage.get_item(self.key)
        except StorageError as e:
            print(f"[WARN] Could not read metrics: {e}", file=sys.stderr)
            return None
        if not raw:
            return None
        try:
            return MetricsState.model_validate_json(raw)
        except ValidationError as e:
            print(f"[WARN] Stored metrics are malformed, starting fresh ({e.error_count()} errors).", file=sys.stderr)
            return None

    def _commit(self, state: MetricsState) -> MetricsState:
        self._state = state
        try:
            self.storage.set_item(self.key, state.to_json())
        except StorageError as e:
            print(f"[WARN] Could not persist metrics: {e}", file=sys.stderr)
        return state

    def load(self) -> MetricsState:
        state = self._read()
        if state is None:
            state = MetricsState.fresh(self.identity.get_or_create(), self.now())
            xtrace("metrics_initialized", {"session": state.session_id})
        return self._commit(state)

    def record_attempt(self, success: bool) -> MetricsState:
        prev = self.state
        return self._commit(
            prev.model_copy(
                update={
                    "attempts": prev.attempts + 1,
                    "errors": prev.errors + (0 if success else 1),
                }
            )
        )

    def record_skip(self) -> MetricsState:
        prev = self.state
        return self._commit(prev.model_copy(update={"skips": prev.skips + 1}))

    def append_challenge(
        self,
        challenge_id: ChallengeId,
        difficulty: str,
        attempts: int,
        time_spent: float,
    ) -> MetricsState:
        prev = self.state
        record = ChallengeRecord(
            challenge_id=challenge_id,
            difficulty=difficulty,
            time_spent=time_spent,
            attempts=attempts,
            completed_at=self.now(),
        )
        return self._commit(
            prev.model_copy(
                update={
                    "completed_challenges": prev.completed_challenges + 1,
                    "challenge_details": prev.challenge_details + (record,),
                }
            )
        )

    def reset(self) -> MetricsState:
        session_id = self.identity.regenerate()
        xtrace("metrics_reset", {"session": session_id})
        return self._commit(MetricsState.fresh(session_id, self.now()))

    def snapshot(self, now: Optional[datetime] = None) -> MetricsSnapshot:
        return MetricsSnapshot.of(self.state, now or self.now())
