from __future__ import annotations

"""Summary computations over challenge and session frames."""

import numpy as np
import pandas as pd

from .config import AnalyticsConfig


def add_rates(sessions: pd.DataFrame) -> pd.DataFrame:
    """Add error_rate (errors / attempts, 0 when no attempts) and skip_rate."""
    out = sessions.copy()
    attempts = out["attempts"].astype("float64").to_numpy()
    errors = out["errors"].astype("float64").to_numpy()
    out["error_rate"] = np.divide(errors, attempts, out=np.zeros_like(attempts), where=attempts > 0)
    seen = (out["completed"] + out["skips"]).astype("float64").to_numpy()
    out["skip_rate"] = np.divide(
        out["skips"].astype("float64").to_numpy(), seen, out=np.zeros_like(seen), where=seen > 0
    )
    return out


def summarize_by_difficulty(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Per difficulty: count, mean/median capped time, mean attempts, first-try rate.

    A first try is a challenge completed with no earlier failed attempts.
    """
    work = df.copy()
    work["difficulty"] = work["difficulty"].astype(pd.CategoricalDtype(list(cfg.difficulty_order), ordered=True))
    work["time_capped_s"] = np.minimum(work["time_spent_s"].astype("float64"), float(cfg.time_cap_s))
    work["first_try"] = (work["attempts"].fillna(0).astype("int64") == 0).astype("float64")
    work["attempts_f"] = work["attempts"].astype("float64")
    g = work.groupby("difficulty", observed=False)
    summary = pd.DataFrame(
        {
            "count": g.size(),
            "mean_time_s": g["time_capped_s"].mean(),
            "median_time_s": g["time_capped_s"].median(),
            "mean_attempts": g["attempts_f"].mean(),
            "first_try_rate": g["first_try"].mean(),
        }
    )
    return summary
