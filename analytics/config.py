from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from typing import Tuple

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for summarizing exported study data.

    - time_cap_s: per-challenge time cap in seconds (>0); longer times are
      treated as idle and clipped
    - difficulty_order: ordered difficulty labels for categorical sorting
    """

    time_cap_s: float = Field(1800.0, gt=0)
    difficulty_order: Tuple[str, ...] = ("easy", "medium", "hard")
