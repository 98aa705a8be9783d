from .config import AnalyticsConfig
from .metrics import add_rates, summarize_by_difficulty
from .prepare import export_ndjson, load_exports, session_frame, write_parquet

__all__ = [
    "AnalyticsConfig",
    "add_rates",
    "summarize_by_difficulty",
    "export_ndjson",
    "load_exports",
    "session_frame",
    "write_parquet",
]
