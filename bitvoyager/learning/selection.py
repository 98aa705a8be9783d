from __future__ import annotations

"""Question selection per mode.

Standard: one question per difficulty, in DIFFICULTY_ORDER.
Learning: retries first, then questions closest to the learner's level.
"""

import random
from typing import Dict, List, Mapping, Optional

from ..metrics.schema import DIFFICULTY_ORDER
from ..util.randomness import pick_one, shuffled
from .schema import Question, UserProfile

DEFAULT_LEARNING_COUNT = 5


def target_rank(level: float) -> int:
    """Map a 0..1 skill level onto a difficulty rank."""
    n = len(DIFFICULTY_ORDER)
    return min(n - 1, max(0, int(level * n)))


def select_standard(bank: Mapping[int, Question], rng: random.Random | None = None) -> Optional[List[Question]]:
    picked: List[Question] = []
    for difficulty in DIFFICULTY_ORDER:
        pool = [q for q in bank.values() if q.difficulty == difficulty]
        if not pool:
            return None
        picked.append(pick_one(pool, rng))
    return picked


def select_learning(
    profile: UserProfile,
    bank: Mapping[int, Question],
    count: int = DEFAULT_LEARNING_COUNT,
    *,
    initial_skill: float = 0.0,
    rng: random.Random | None = None,
) -> Optional[List[Question]]:
    if len(bank) < count:
        return None
    completed = set(profile.completed_questions)
    open_qs = [q for q in bank.values() if q.id not in completed]
    retries = [q for q in open_qs if profile.is_retry(q.id) or profile.previously_failed(q.id)]
    retry_ids = {q.id for q in retries}

    def distance(q: Question) -> int:
        level = profile.skill_levels.get(q.topic, initial_skill)
        return abs(q.rank - target_rank(level))

    fresh = sorted(shuffled([q for q in open_qs if q.id not in retry_ids], rng), key=distance)
    filler = shuffled([q for q in bank.values() if q.id in completed], rng)
    ordered = shuffled(retries, rng) + fresh + filler
    picked = ordered[:count]
    # Present easier material first within a mission.
    return sorted(picked, key=lambda q: q.rank)


def select_questions(
    mode: str,
    profile: Optional[UserProfile],
    bank: Dict[int, Question],
    *,
    learning_count: int = DEFAULT_LEARNING_COUNT,
    initial_skill: float = 0.0,
    rng: random.Random | None = None,
) -> Optional[List[Question]]:
    if mode == "standard":
        return select_standard(bank, rng)
    if mode == "learning":
        return select_learning(profile or UserProfile(), bank, learning_count, initial_skill=initial_skill, rng=rng)
    return None
