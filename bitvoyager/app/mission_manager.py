from __future__ import annotations

"""Mission manager: drives one mode session through its challenges.

ModeUnselected → Initializing → Active(i) → Complete, with Errored reachable
from Initializing. Each transition reports to the metrics tracker; the
tracker never calls back. Mode-specific behaviour lives in policy.advance.
"""

import sys
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from storage import KeyValueStore, StorageError, StorageKeys

from ..learning.bank import QuestionBank
from ..learning.profile import ProfileStore, SkillRules, update_skill_levels
from ..learning.schema import Question, UserProfile
from ..learning.selection import select_questions
from ..metrics.schema import DIFFICULTY_ORDER, MODES
from ..metrics.tracker import MetricsTracker
from ..policy.advance import AdvancePolicy, LearningAdvance, Outcome, StandardAdvance
from .events import ATTEMPT, CODE_CHANGE, COMPLETE, SKIP, EventBus
from .explain import trace as xtrace

NOT_ENOUGH_QUESTIONS = "Could not find enough suitable questions"


class Phase(str, Enum):
    MODE_UNSELECTED = "mode_unselected"
    INITIALIZING = "initializing"
    ACTIVE = "active"
    COMPLETE = "complete"
    ERRORED = "errored"


@dataclass
class MissionProgress:
    """Transient per-run state; never persisted."""

    mode: str = "none"
    phase: Phase = Phase.MODE_UNSELECTED
    current_index: int = 0
    current_attempts: int = 0
    completed_difficulties: List[str] = field(default_factory=list)
    selected_questions: List[Question] = field(default_factory=list)
    user_code_map: Dict[int, str] = field(default_factory=dict)
    profile: Optional[UserProfile] = None
    error: Optional[str] = None
    show_export: bool = False

    @property
    def mission_complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.selected_questions) - 1


@dataclass(frozen=True)
class ProgressInfo:
    """Summary handed to the renderer alongside the current question."""

    current: int
    total: int
    difficulty: str
    completed_difficulties: Tuple[str, ...]
    mode: str
    profile: Optional[UserProfile]
    attempts: int
    is_retry: bool
    previously_failed: bool


@dataclass(frozen=True)
class Collaborators:
    question_ids: Callable[[], Iterable[int]]
    load_question: Callable[[int], Question]
    select_questions: Callable[..., Optional[List[Question]]]
    profiles: ProfileStore
    rules: SkillRules = field(default_factory=SkillRules)
    update_skill_levels: Callable[..., UserProfile] = update_skill_levels
    today: Callable[[], date] = date.today


def default_collaborators(cfg: Dict[str, Any], storage: KeyValueStore) -> Collaborators:
    bank_cfg = cfg.get("bank", {})
    learning = cfg.get("learning", {})
    bank = QuestionBank(bank_cfg.get("path"))
    max_id = int(bank_cfg.get("max_id", 18))
    keys = StorageKeys(**(cfg.get("storage", {}).get("keys") or {}))
    rules = SkillRules.from_config(cfg)
    count = int(learning.get("questions_per_mission", 5))

    def _select(mode: str, profile: Optional[UserProfile], questions: Dict[int, Question]) -> Optional[List[Question]]:
        return select_questions(mode, profile, questions, learning_count=count, initial_skill=rules.initial_skill)

    return Collaborators(
        question_ids=lambda: range(1, max_id + 1),
        load_question=bank.load_question,
        select_questions=_select,
        profiles=ProfileStore(storage, keys.profile),
        rules=rules,
    )


class MissionManager:
    def __init__(self, tracker: MetricsTracker, collaborators: Collaborators) -> None:
        self.tracker = tracker
        self.collab = collaborators
        self.progress = MissionProgress()
        self._policy: Optional[AdvancePolicy] = None

    @property
    def phase(self) -> Phase:
        return self.progress.phase

    def bind(self, bus: EventBus) -> None:
        bus.subscribe(ATTEMPT, lambda success: self.record_attempt(bool(success)))
        bus.subscribe(SKIP, lambda _p: self.skip())
        bus.subscribe(COMPLETE, lambda _p: self.complete_challenge())
        bus.subscribe(CODE_CHANGE, lambda p: self.edit_code(p[0], p[1]))

    # --- Mode entry ---

    def select_mode(self, mode: Any) -> Phase:
        if self.progress.phase is not Phase.MODE_UNSELECTED:
            print(f"[WARN] Mode already chosen ({self.progress.mode}); ignoring {mode!r}.", file=sys.stderr)
            return self.progress.phase
        if mode not in MODES:
            self.tracker.start_mode(mode)  # reports the invalid mode
            return self.progress.phase
        return self._enter(mode)

    def retry(self) -> Phase:
        if self.progress.phase is not Phase.ERRORED:
            return self.progress.phase
        return self._enter(self.progress.mode)

    def _enter(self, mode: str) -> Phase:
        p = self.progress
        p.mode = mode
        p.phase = Phase.INITIALIZING
        p.error = None
        self.tracker.start_mode(mode)
        p.profile = self.collab.profiles.load() if mode == "learning" else None
        self._initialize()
        return p.phase

    def load_bank(self) -> Dict[int, Question]:
        """Load every known question; a failing id is left out."""
        bank: Dict[int, Question] = {}
        for qid in self.collab.question_ids():
            try:
                bank[qid] = self.collab.load_question(qid)
            except (KeyError, ValueError) as e:
                print(f"[WARN] Could not load question {qid}: {e}", file=sys.stderr)
        return bank

    def _initialize(self) -> None:
        p = self.progress
        try:
            questions = self.collab.select_questions(p.mode, p.profile, self.load_bank())
            if not questions:
                raise LookupError(NOT_ENOUGH_QUESTIONS)
            if p.mode == "standard" and len(questions) > len(DIFFICULTY_ORDER):
                raise LookupError(f"Standard mode takes {len(DIFFICULTY_ORDER)} questions, got {len(questions)}")
        except Exception as e:
            p.phase = Phase.ERRORED
            p.error = str(e) or e.__class__.__name__
            p.selected_questions = []
            p.user_code_map = {}
            xtrace("mission_errored", {"mode": p.mode, "error": p.error})
            return

        p.selected_questions = list(questions)
        p.user_code_map = {q.id: q.code for q in questions}
        p.current_index = 0
        p.current_attempts = 0
        p.completed_difficulties = []
        self._policy = self._make_policy(p.mode)
        p.phase = Phase.ACTIVE
        xtrace("mission_started", {"mode": p.mode, "questions": [q.id for q in questions]})

    def _make_policy(self, mode: str) -> AdvancePolicy:
        if mode == "learning":
            return LearningAdvance(
                profiles=self.collab.profiles,
                rules=self.collab.rules,
                today=self.collab.today,
                update=self.collab.update_skill_levels,
            )
        return StandardAdvance()

    # --- Active(i) events ---

    def _active_question(self) -> Optional[Question]:
        p = self.progress
        if p.phase is not Phase.ACTIVE:
            return None
        if not 0 <= p.current_index < len(p.selected_questions):
            return None
        return p.selected_questions[p.current_index]

    def record_attempt(self, success: bool) -> None:
        if self._active_question() is None:
            return
        self.progress.current_attempts += 1
        self.tracker.record_attempt(success)

    def skip(self) -> None:
        if self._active_question() is None:
            return
        self.tracker.record_skip()
        self._advance(Outcome(completed=False, skipped=True))
        if self.progress.phase is Phase.ACTIVE:
            self.tracker.start_challenge()

    def complete_challenge(self) -> None:
        """A passing run: counts as the final attempt, then records the challenge."""
        question = self._active_question()
        if question is None:
            return
        self.tracker.record_attempt(True)
        self.tracker.record_challenge_completion(question.id, question.difficulty, self.progress.current_attempts)
        self._advance(Outcome(completed=True))

    def _advance(self, outcome: Outcome) -> None:
        p = self.progress
        if self._policy is None:
            return
        question = p.selected_questions[p.current_index]
        self._policy.record(p, question, outcome)
        if not p.is_last:
            p.current_index += 1
            p.current_attempts = 0
            return
        self._policy.finish(p)
        p.phase = Phase.COMPLETE
        self.tracker.complete_mode()
        p.show_export = True
        xtrace("mission_complete", {"mode": p.mode, "completed": list(p.completed_difficulties)})

    # --- Renderer side ---

    def edit_code(self, question_id: int, code: str) -> None:
        self.progress.user_code_map[question_id] = code

    def current_question(self) -> Optional[Question]:
        """Current question with the draft code substituted in, or None."""
        question = self._active_question()
        if question is None:
            return None
        draft = self.progress.user_code_map.get(question.id) or question.code
        return question.model_copy(update={"code": draft})

    def progress_info(self) -> Optional[ProgressInfo]:
        question = self._active_question()
        if question is None:
            return None
        p = self.progress
        learning = p.mode == "learning" and p.profile is not None
        return ProgressInfo(
            current=p.current_index + 1,
            total=len(p.selected_questions),
            difficulty=DIFFICULTY_ORDER[p.current_index] if p.mode == "standard" else question.difficulty,
            completed_difficulties=tuple(p.completed_difficulties),
            mode=p.mode,
            profile=p.profile if p.mode == "learning" else None,
            attempts=p.current_attempts,
            is_retry=bool(learning and p.profile.is_retry(question.id)),
            previously_failed=bool(learning and p.profile.previously_failed(question.id)),
        )

    def toggle_export(self) -> bool:
        self.progress.show_export = not self.progress.show_export
        return self.progress.show_export


def reset_study(storage: KeyValueStore, keys: StorageKeys | None = None) -> None:
    """Drop identity, metrics and profile; the next run starts clean."""
    for key in (keys or StorageKeys()).all():
        try:
            storage.remove_item(key)
        except StorageError as e:
            print(f"[WARN] Could not remove '{key}': {e}", file=sys.stderr)
