from __future__ import annotations

"""Load exported metrics documents into DataFrames."""

import json
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from bitvoyager.metrics.schema import DIFFICULTY_ORDER, MetricsSnapshot

from .metrics import add_rates

CHALLENGE_COLUMNS = ["session_id", "challenge_id", "difficulty", "time_spent_s", "attempts", "completed_at"]


def _read_snapshot(path: Path | str) -> MetricsSnapshot:
    with Path(path).open("r", encoding="utf-8") as f:
        return MetricsSnapshot.model_validate(json.load(f))


def _empty_challenges() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "session_id": pd.Series(dtype="string"),
            "challenge_id": pd.Series(dtype="string"),
            "difficulty": pd.Series(dtype=pd.CategoricalDtype(list(DIFFICULTY_ORDER), ordered=True)),
            "time_spent_s": pd.Series(dtype="float64"),
            "attempts": pd.Series(dtype="Int64"),
            "completed_at": pd.Series(dtype=pd.DatetimeTZDtype(tz="UTC")),
        }
    )


def load_exports(paths: Iterable[Path | str]) -> pd.DataFrame:
    """One row per challenge record across all exports, sorted by completion time."""
    rows: List[dict] = []
    for p in paths:
        snap = _read_snapshot(p)
        for rec in snap.challenge_details:
            rows.append(
                {
                    "session_id": snap.session_id,
                    "challenge_id": str(rec.challenge_id),
                    "difficulty": rec.difficulty,
                    "time_spent_s": rec.time_spent,
                    "attempts": rec.attempts,
                    "completed_at": rec.completed_at,
                }
            )
    if not rows:
        return _empty_challenges()
    df = pd.DataFrame(rows, columns=CHALLENGE_COLUMNS)
    df = df.astype(
        {
            "session_id": "string",
            "challenge_id": "string",
            "difficulty": pd.CategoricalDtype(list(DIFFICULTY_ORDER), ordered=True),
            "time_spent_s": "float64",
            "attempts": "Int64",
        }
    )
    df["completed_at"] = pd.to_datetime(df["completed_at"], utc=True)
    return df.sort_values(["completed_at", "session_id"], kind="stable").reset_index(drop=True)


def session_frame(paths: Iterable[Path | str]) -> pd.DataFrame:
    """One row per export document with its counters and derived rates."""
    rows = []
    for p in paths:
        snap = _read_snapshot(p)
        rows.append(
            {
                "session_id": snap.session_id,
                "attempts": snap.attempts,
                "errors": snap.errors,
                "skips": snap.skips,
                "completed": snap.completed_challenges,
                "duration_s": snap.duration,
            }
        )
    df = pd.DataFrame(rows, columns=["session_id", "attempts", "errors", "skips", "completed", "duration_s"])
    return add_rates(df)


def write_parquet(df: pd.DataFrame, out_path: Path | str) -> None:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(out_path, engine="pyarrow", compression="zstd", index=False)


def export_ndjson(df: pd.DataFrame, out_path: Path | str) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")
