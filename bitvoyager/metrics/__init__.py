from .schema import DIFFICULTY_ORDER, MODES, ChallengeRecord, MetricsSnapshot, MetricsState
from .identity import IdentityStore, generate_session_id
from .store import MetricsStore
from .timing import IntervalClock
from .export import export_filename, write_export
from .tracker import MetricsTracker, build_tracker

__all__ = [
    "DIFFICULTY_ORDER",
    "MODES",
    "ChallengeRecord",
    "MetricsSnapshot",
    "MetricsState",
    "IdentityStore",
    "generate_session_id",
    "MetricsStore",
    "IntervalClock",
    "export_filename",
    "write_export",
    "MetricsTracker",
    "build_tracker",
]
