from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from storage import MemoryStorage, StorageError

from bitvoyager.app.mission_manager import Collaborators
from bitvoyager.learning.profile import ProfileStore
from bitvoyager.learning.schema import Question, UserProfile
from bitvoyager.metrics.tracker import MetricsTracker

T0 = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


class BrokenStorage:
    """Every operation fails, like a browser with storage disabled."""

    def get_item(self, key: str) -> Optional[str]:
        raise StorageError("storage disabled")

    def set_item(self, key: str, value: str) -> None:
        raise StorageError("storage disabled")

    def remove_item(self, key: str) -> None:
        raise StorageError("storage disabled")

    def keys(self) -> List[str]:
        raise StorageError("storage disabled")


def make_question(qid: int, difficulty: str = "easy", topic: str = "basics") -> Question:
    return Question(
        id=qid,
        title=f"Q{qid}",
        topic=topic,
        difficulty=difficulty,
        code=f"x = {qid}\n",
        checks=[f"x == {qid}"],
    )


STANDARD_BANK: Dict[int, Question] = {
    1: make_question(1, "easy"),
    2: make_question(2, "medium"),
    3: make_question(3, "hard"),
}


def make_tracker(storage=None, clock: FakeClock | None = None, export_dir: str = "./exports") -> MetricsTracker:
    return MetricsTracker(storage if storage is not None else MemoryStorage(), now=clock or FakeClock(), export_dir=export_dir)


def fixed_collaborators(
    storage,
    questions: List[Question],
    *,
    today: date = date(2026, 10, 18),
    bank: Dict[int, Question] | None = None,
) -> Collaborators:
    """Collaborators whose selection always returns `questions` in order."""
    source = bank if bank is not None else {q.id: q for q in questions}

    def _load(qid: int) -> Question:
        return source[qid]

    def _select(mode: str, profile: Optional[UserProfile], loaded: Dict[int, Question]):
        return list(questions)

    return Collaborators(
        question_ids=lambda: sorted(source),
        load_question=_load,
        select_questions=_select,
        profiles=ProfileStore(storage, "pythonLearningProfile"),
        today=lambda: today,
    )
