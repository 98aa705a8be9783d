from __future__ import annotations

"""Per-mode advance strategies for the mission state machine.

Both strategies plug into the same skeleton in MissionManager: record the
outcome, then either move to the next index or finish the mission.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Callable, Literal, Protocol

from ..learning.profile import ProfileStore, SkillRules, update_skill_levels
from ..learning.schema import Question, UserProfile
from ..metrics.schema import DIFFICULTY_ORDER

if TYPE_CHECKING:
    from ..app.mission_manager import MissionProgress


@dataclass(frozen=True)
class Outcome:
    completed: bool
    skipped: bool = False


class AdvancePolicy(Protocol):
    mode: Literal["standard", "learning"]

    def record(self, progress: "MissionProgress", question: Question, outcome: Outcome) -> None: ...

    def finish(self, progress: "MissionProgress") -> None: ...


def difficulty_for_position(index: int) -> str:
    return DIFFICULTY_ORDER[index]


def update_streak(profile: UserProfile, today: date) -> UserProfile:
    """Same day: unchanged. Previous day: +1. Anything else: back to 1."""
    last = profile.last_session_date
    if last == today:
        return profile
    if last is not None and last == today - timedelta(days=1):
        days = profile.consecutive_days + 1
    else:
        days = 1
    return profile.model_copy(update={"consecutive_days": days, "last_session_date": today})


class StandardAdvance:
    mode: Literal["standard"] = "standard"

    def record(self, progress: "MissionProgress", question: Question, outcome: Outcome) -> None:
        if outcome.completed:
            progress.completed_difficulties.append(difficulty_for_position(progress.current_index))

    def finish(self, progress: "MissionProgress") -> None:
        return None


@dataclass
class LearningAdvance:
    profiles: ProfileStore
    rules: SkillRules = field(default_factory=SkillRules)
    today: Callable[[], date] = date.today
    update: Callable[..., UserProfile] = update_skill_levels
    mode: Literal["learning"] = "learning"

    def record(self, progress: "MissionProgress", question: Question, outcome: Outcome) -> None:
        profile = progress.profile or UserProfile()
        attempts = 0 if outcome.skipped else progress.current_attempts + 1
        updated = self.update(profile, question, outcome.completed, attempts, outcome.skipped, self.rules)
        if outcome.completed:
            updated = updated.with_completed(question.id)
        self.profiles.save(updated)
        progress.profile = updated

    def finish(self, progress: "MissionProgress") -> None:
        profile = progress.profile or UserProfile()
        updated = update_streak(profile, self.today())
        if updated is not profile:
            self.profiles.save(updated)
            progress.profile = updated
