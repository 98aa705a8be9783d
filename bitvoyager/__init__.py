"""BitVoyager: challenge progression and study-metrics tracking.

The metrics tracker records attempts, skips and completed challenges for one
local session and exports them for later analysis; the mission manager drives
a standard or learning mode run through its challenges.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .metrics import MetricsSnapshot, MetricsState, MetricsTracker, build_tracker  # noqa: E402

__all__ = ["__version__", "MetricsSnapshot", "MetricsState", "MetricsTracker", "build_tracker"]
