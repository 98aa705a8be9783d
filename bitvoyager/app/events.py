from __future__ import annotations

"""Tiny pub/sub bus between the challenge renderer and the mission manager."""

import sys
from typing import Any, Callable, Dict, List

# Events the renderer emits.
ATTEMPT = "attempt"
SKIP = "skip"
COMPLETE = "complete"
CODE_CHANGE = "code_change"


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any = None) -> int:
        """Deliver to every handler; returns how many ran without error."""
        ok = 0
        for h in self._subs.get(event, []):
            try:
                h(payload)
            except Exception as e:
                print(f"[WARN] Handler for '{event}' failed: {e}", file=sys.stderr)
            else:
                ok += 1
        return ok
