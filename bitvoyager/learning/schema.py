from __future__ import annotations

"""Question and learner-profile models."""

from datetime import date
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..metrics.schema import DIFFICULTY_ORDER, Difficulty


class Question(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(ge=1)
    title: str
    topic: str = "general"
    difficulty: Difficulty
    description: str = ""
    code: str = ""
    checks: List[str] = Field(default_factory=list)

    @property
    def rank(self) -> int:
        return DIFFICULTY_ORDER.index(self.difficulty)


class UserProfile(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    skill_levels: Dict[str, float] = Field(default_factory=dict)
    completed_questions: Tuple[int, ...] = ()
    skipped_questions: Tuple[int, ...] = ()
    failed_attempts: Dict[int, int] = Field(default_factory=dict)
    last_session_date: Optional[date] = None
    consecutive_days: int = Field(default=0, ge=0)

    def with_completed(self, question_id: int) -> "UserProfile":
        return self.model_copy(update={"completed_questions": self.completed_questions + (question_id,)})

    def is_retry(self, question_id: int) -> bool:
        return question_id in self.skipped_questions

    def previously_failed(self, question_id: int) -> bool:
        return self.failed_attempts.get(question_id, 0) > 0

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
