from __future__ import annotations

"""Run a draft solution against a question's check expressions.

Drafts and checks are executed with exec/eval inside this process, with no
sandbox: a draft can do anything the running user can. Only grade code you
would be willing to run yourself.
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..learning.schema import Question


@dataclass(frozen=True)
class GradeResult:
    passed: bool
    feedback: str


def grade(question: Question, code: str) -> GradeResult:
    """Execute `code` in a fresh namespace, then evaluate every check.

    Any exception from the learner's code is feedback, not a crash. The code
    is not sandboxed; it runs in this process with the user's permissions.
    """
    namespace: Dict[str, Any] = {"__name__": "__challenge__"}
    try:
        exec(compile(code, f"<question {question.id}>", "exec"), namespace)
    except Exception as e:
        return GradeResult(False, f"Your code raised {e.__class__.__name__}: {e}")
    if not question.checks:
        return GradeResult(True, "No checks defined; accepted.")
    for check in question.checks:
        try:
            ok = bool(eval(check, namespace))
        except Exception as e:
            return GradeResult(False, f"Check `{check}` raised {e.__class__.__name__}: {e}")
        if not ok:
            return GradeResult(False, f"Check failed: {check}")
    return GradeResult(True, f"All {len(question.checks)} checks passed.")
