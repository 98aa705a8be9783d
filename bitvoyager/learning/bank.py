from __future__ import annotations

"""Question bank loader (YAML).

Questions live in a versioned YAML resource, keyed by integer id.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from .schema import Question


def _default_bank_path() -> Path:
    return Path(__file__).resolve().parents[1] / "resources" / "questions" / "python.yml"


class QuestionBank:
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else _default_bank_path()
        self._raw: Dict[int, Dict[str, Any]] | None = None

    def _entries(self) -> Dict[int, Dict[str, Any]]:
        if self._raw is None:
            with self.path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            entries: Dict[int, Dict[str, Any]] = {}
            for item in data.get("questions") or []:
                if isinstance(item, dict) and "id" in item:
                    entries[int(item["id"])] = item
            self._raw = entries
        return self._raw

    def ids(self) -> List[int]:
        return sorted(self._entries())

    def load_question(self, question_id: int) -> Question:
        """Raises KeyError for unknown ids, ValidationError for malformed entries."""
        raw = self._entries().get(int(question_id))
        if raw is None:
            raise KeyError(f"Unknown question id: {question_id}")
        return Question.model_validate(raw)
