from __future__ import annotations

"""Export artifact: the snapshot written as a JSON document."""

from pathlib import Path

from .schema import MetricsSnapshot


def export_filename(session_id: str) -> str:
    return f"bitvoyager_metrics_{session_id}.json"


def write_export(snapshot: MetricsSnapshot, directory: Path | str, indent: int | None = 2) -> Path:
    """Write the snapshot into `directory`; raises OSError on failure."""
    out_dir = Path(directory).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(snapshot.session_id)
    path.write_text(snapshot.to_document(indent=indent), encoding="utf-8")
    return path
