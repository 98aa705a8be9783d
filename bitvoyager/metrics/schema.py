from __future__ import annotations

"""Pydantic models for the persisted metrics document and its export snapshot.

Fields are snake_case in Python and camelCase on disk so documents written by
earlier versions of the tool keep loading.
"""

from datetime import datetime, timezone
from typing import Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Ordered lookup table: standard mode position → difficulty label.
DIFFICULTY_ORDER: Tuple[str, ...] = ("easy", "medium", "hard")
MODES = {"standard", "learning"}

Difficulty = Literal["easy", "medium", "hard"]
ChallengeId = Union[int, str]


def _ensure_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ChallengeRecord(_Document):
    challenge_id: ChallengeId
    difficulty: Difficulty
    time_spent: float = Field(ge=0)
    attempts: int = Field(ge=0)
    completed_at: datetime

    @field_validator("completed_at")
    @classmethod
    def _completed_utc(cls, v: datetime) -> datetime:
        return _ensure_utc(v)


class MetricsState(_Document):
    session_id: str = Field(min_length=1)
    start_time: datetime
    attempts: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    skips: int = Field(default=0, ge=0)
    completed_challenges: int = Field(default=0, ge=0)
    challenge_details: Tuple[ChallengeRecord, ...] = ()

    @field_validator("start_time")
    @classmethod
    def _start_utc(cls, v: datetime) -> datetime:
        return _ensure_utc(v)

    @model_validator(mode="after")
    def _counters_consistent(self) -> "MetricsState":
        if self.errors > self.attempts:
            raise ValueError("errors must be <= attempts")
        if self.completed_challenges != len(self.challenge_details):
            raise ValueError("completedChallenges must equal len(challengeDetails)")
        return self

    @classmethod
    def fresh(cls, session_id: str, now: datetime) -> "MetricsState":
        return cls(session_id=session_id, start_time=now)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class MetricsSnapshot(MetricsState):
    """Read-only projection of a MetricsState at a given instant."""

    export_time: datetime
    duration: float

    @classmethod
    def of(cls, state: MetricsState, now: datetime) -> "MetricsSnapshot":
        now = _ensure_utc(now)
        return cls(
            **state.model_dump(),
            export_time=now,
            duration=(now - state.start_time).total_seconds(),
        )

    def to_document(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
