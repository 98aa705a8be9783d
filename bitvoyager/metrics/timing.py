from __future__ import annotations

"""Interval clock kept outside the persisted document."""

from datetime import datetime
from typing import Callable, Optional

from .identity import utcnow


class IntervalClock:
    def __init__(self, now: Callable[[], datetime] = utcnow) -> None:
        self.now = now
        self._started_at: Optional[datetime] = None

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def mark_start(self) -> datetime:
        self._started_at = self.now()
        return self._started_at

    def mark_end(self) -> float:
        """Seconds since the last start, 0.0 if no interval is active."""
        if self._started_at is None:
            return 0.0
        return max(0.0, (self.now() - self._started_at).total_seconds())

    def clear(self) -> None:
        self._started_at = None
