from __future__ import annotations

"""Metrics facade: the operations the mission flow and UI call.

Composes the identity store, the metrics store and the interval clock. It is
built once per process by `build_tracker` and passed to every consumer.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from storage import KeyValueStore, StorageKeys, open_storage

from ..app.explain import trace as xtrace
from .export import write_export
from .identity import IdentityStore, utcnow
from .schema import MODES, ChallengeId, MetricsSnapshot, MetricsState
from .store import MetricsStore
from .timing import IntervalClock


class MetricsTracker:
    def __init__(
        self,
        storage: KeyValueStore,
        keys: StorageKeys | None = None,
        *,
        export_dir: Path | str = "./exports",
        export_indent: int | None = 2,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.keys = keys or StorageKeys()
        self.now = now
        self.export_dir = Path(export_dir)
        self.export_indent = export_indent
        self.identity = IdentityStore(storage, self.keys.session_id, now)
        self.store = MetricsStore(storage, self.keys.metrics, self.identity, now)
        self.clock = IntervalClock(now)
        self.last_export_path: Optional[Path] = None
        self.store.load()

    @property
    def session_id(self) -> str:
        return self.store.state.session_id

    @property
    def metrics(self) -> MetricsState:
        return self.store.state

    def start_mode(self, mode: Any) -> None:
        if not isinstance(mode, str) or mode not in MODES:
            print(f"ERROR: Invalid mode: {mode!r}", file=sys.stderr)
            return
        self.clock.mark_start()
        xtrace("mode_started", {"mode": mode})

    def complete_mode(self) -> None:
        self.clock.clear()
        xtrace("mode_completed", {"session": self.session_id})

    def start_challenge(self) -> None:
        self.clock.mark_start()

    def record_attempt(self, success: bool = False) -> MetricsState:
        return self.store.record_attempt(bool(success))

    def record_skip(self) -> MetricsState:
        return self.store.record_skip()

    def record_challenge_completion(self, challenge_id: ChallengeId, difficulty: str, attempts: int) -> MetricsState:
        time_spent = self.clock.mark_end()
        try:
            state = self.store.append_challenge(challenge_id, difficulty, int(attempts), time_spent)
        except ValidationError as e:
            print(f"ERROR: Challenge {challenge_id!r} not recorded: {e.errors()[0]['msg']}", file=sys.stderr)
            state = self.store.state
        else:
            xtrace(
                "challenge_completed",
                {"id": challenge_id, "difficulty": difficulty, "attempts": attempts, "time_spent": time_spent},
            )
        # Next challenge is timed from the instant this one finished.
        self.clock.mark_start()
        return state

    def get_metrics_data(self) -> MetricsSnapshot:
        return self.store.snapshot(self.now())

    def export_metrics(self) -> MetricsSnapshot:
        data = self.get_metrics_data()
        try:
            self.last_export_path = write_export(data, self.export_dir, self.export_indent)
        except OSError as e:
            print(f"[WARN] Metrics export failed: {e}", file=sys.stderr)
        else:
            xtrace("metrics_exported", {"path": str(self.last_export_path)})
        return data

    def reset_metrics(self) -> str:
        return self.store.reset().session_id


def build_tracker(
    cfg: Dict[str, Any],
    storage: KeyValueStore | None = None,
    now: Callable[[], datetime] = utcnow,
) -> MetricsTracker:
    st = cfg.get("storage", {})
    exp = cfg.get("export", {})
    return MetricsTracker(
        storage if storage is not None else open_storage(cfg),
        StorageKeys(**(st.get("keys") or {})),
        export_dir=exp.get("directory", "./exports"),
        export_indent=exp.get("indent", 2),
        now=now,
    )
