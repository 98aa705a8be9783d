from __future__ import annotations

"""Durable key names and the storage error type."""

from pydantic import BaseModel, ConfigDict, Field

# Key strings are part of the on-disk format; existing sessions depend on them.
SESSION_ID_KEY = "bitvoyager_session_id"
METRICS_KEY = "bitvoyager_metrics"
PROFILE_KEY = "pythonLearningProfile"

BACKENDS = {"file", "memory"}


class StorageError(OSError):
    """Raised when the durable store cannot be read or written."""


class StorageKeys(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default=SESSION_ID_KEY, min_length=1)
    metrics: str = Field(default=METRICS_KEY, min_length=1)
    profile: str = Field(default=PROFILE_KEY, min_length=1)

    def all(self) -> list[str]:
        return [self.session_id, self.metrics, self.profile]
