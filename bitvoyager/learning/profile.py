from __future__ import annotations

"""Learner profile persistence and skill adaptation."""

import sys
from dataclasses import dataclass
from typing import Any, Dict

from pydantic import ValidationError

from storage import KeyValueStore, StorageError

from .schema import Question, UserProfile


@dataclass(frozen=True)
class SkillRules:
    """Step sizes for skill adaptation (config section `learning`)."""

    initial_skill: float = 0.0
    completion_gain: float = 0.15
    skip_penalty: float = 0.05
    failure_penalty: float = 0.05

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "SkillRules":
        lc = cfg.get("learning", {})
        return cls(
            initial_skill=float(lc.get("initial_skill", 0.0)),
            completion_gain=float(lc.get("completion_gain", 0.15)),
            skip_penalty=float(lc.get("skip_penalty", 0.05)),
            failure_penalty=float(lc.get("failure_penalty", 0.05)),
        )


class ProfileStore:
    def __init__(self, storage: KeyValueStore, key: str) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> UserProfile:
        try:
            raw = self.storage.get_item(self.key)
        except StorageError as e:
            print(f"[WARN] Could not read learning profile: {e}", file=sys.stderr)
            return UserProfile()
        if not raw:
            return UserProfile()
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError:
            print("[WARN] Stored learning profile is malformed, starting fresh.", file=sys.stderr)
            return UserProfile()

    def save(self, profile: UserProfile) -> None:
        try:
            self.storage.set_item(self.key, profile.to_json())
        except StorageError as e:
            print(f"[WARN] Could not persist learning profile: {e}", file=sys.stderr)


def update_skill_levels(
    profile: UserProfile,
    question: Question,
    completed: bool,
    attempts: int,
    skipped: bool,
    rules: SkillRules = SkillRules(),
) -> UserProfile:
    """Return a new profile reflecting one question outcome."""
    levels = dict(profile.skill_levels)
    level = levels.get(question.topic, rules.initial_skill)
    if skipped:
        level -= rules.skip_penalty
    elif completed:
        level += rules.completion_gain / max(int(attempts), 1)
    else:
        level -= rules.failure_penalty
    levels[question.topic] = round(min(1.0, max(0.0, level)), 4)

    skipped_ids = list(profile.skipped_questions)
    if skipped and question.id not in skipped_ids:
        skipped_ids.append(question.id)
    elif completed:
        skipped_ids = [q for q in skipped_ids if q != question.id]

    failed = dict(profile.failed_attempts)
    if completed and attempts > 1:
        failed[question.id] = failed.get(question.id, 0) + int(attempts) - 1
    elif not completed and not skipped:
        failed[question.id] = failed.get(question.id, 0) + 1

    return profile.model_copy(
        update={
            "skill_levels": levels,
            "skipped_questions": tuple(skipped_ids),
            "failed_attempts": failed,
        }
    )
