from __future__ import annotations

"""Milestone tracing (explain mode).

Off by default; `bitvoyager run --explain` turns it on. Each milestone is
one terse line: `[EXPLAIN] event :: {json}`.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

_ENABLED = False
_STREAM: Optional[TextIO] = None


def enable(flag: bool = True, stream: Optional[TextIO] = None) -> None:
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    out = _STREAM or sys.stdout
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        line = "{}"
    print(f"[EXPLAIN] {event} :: {line}", file=out)
