from __future__ import annotations

"""Console challenge renderer.

Shows the current question and progress, and turns keystrokes into the
renderer events (attempt, skip, complete, code_change) on the bus.
"""

from typing import Any, Callable, Dict

from ..metrics.tracker import MetricsTracker
from .events import ATTEMPT, CODE_CHANGE, COMPLETE, SKIP, EventBus
from .grader import grade
from .mission_manager import MissionManager, Phase, ProgressInfo

PROMPT = "[t] test  [v] view code  [e] edit  [s] skip  [m] metrics  [q] quit: "


def export_study_data(tracker: MetricsTracker, inform: Callable[[str], None]) -> None:
    tracker.export_metrics()
    if tracker.last_export_path is not None:
        inform(f"Study data exported to {tracker.last_export_path}")


def _header(info: ProgressInfo) -> str:
    done = ", ".join(info.completed_difficulties) or "-"
    line = f"Mission {info.current}/{info.total} [{info.mode}] difficulty={info.difficulty} attempts={info.attempts} done={done}"
    if info.is_retry:
        line += " (retry)"
    if info.previously_failed:
        line += " (previously failed)"
    return line


def read_block(ask: Callable[[str], str]) -> str:
    """Read lines until a lone '.'; returns the joined block."""
    lines = []
    while True:
        line = ask("")
        if line.strip() == ".":
            break
        lines.append(line)
    return "\n".join(lines) + "\n"


def run_console(manager: MissionManager, bus: EventBus, tracker: MetricsTracker, ui: Dict[str, Any]) -> Phase:
    ask = ui["ask"]
    inform = ui["inform"]
    shown = None
    while manager.phase is Phase.ACTIVE:
        question = manager.current_question()
        info = manager.progress_info()
        if question is None or info is None:
            inform("No question available. Please restart the session.")
            return manager.phase
        if shown != (info.current, question.id):
            inform(f"\n{_header(info)}\n== {question.title} ==\n{question.description}\n")
            shown = (info.current, question.id)

        cmd = ask(PROMPT).strip().lower()
        if cmd == "t":
            result = grade(question, question.code)
            inform(result.feedback)
            if result.passed:
                bus.emit(COMPLETE)
            else:
                bus.emit(ATTEMPT, False)
        elif cmd == "v":
            inform(question.code)
        elif cmd == "e":
            inform("Enter code, finish with a line containing only '.':")
            bus.emit(CODE_CHANGE, (question.id, read_block(ask)))
        elif cmd == "s":
            bus.emit(SKIP)
        elif cmd == "m":
            if manager.toggle_export():
                m = tracker.metrics
                inform(f"Study data: attempts={m.attempts} errors={m.errors} skips={m.skips} completed={m.completed_challenges}  [x] export")
        elif cmd == "x" and manager.progress.show_export:
            export_study_data(tracker, inform)
        elif cmd == "q":
            return manager.phase
        else:
            inform("Unknown command.")
    return manager.phase
