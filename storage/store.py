from __future__ import annotations

"""String key/value store persisted as a single JSON document.

Unit of data: one key → one string value, mirroring browser localStorage.
Every write replaces the whole file atomically.
"""

import json
import sys
from contextlib import suppress
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, List, Optional, Protocol

from .schema import BACKENDS, StorageError


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryStorage:
    """Process-local store (ephemeral runs, tests)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._items)


class LocalStorage:
    """File-backed store. A missing or corrupt file reads as empty."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            print(f"[WARN] Storage file {self.path} is corrupt; treating it as empty.", file=sys.stderr)
            return {}
        if not isinstance(data, dict):
            print(f"[WARN] Storage file {self.path} is not an object; treating it as empty.", file=sys.stderr)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, items: Dict[str, str]) -> None:
        temp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile("w", delete=False, dir=str(self.path.parent), encoding="utf-8") as tmp:
                temp_path = Path(tmp.name)
                json.dump(items, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
            temp_path.replace(self.path)
        except OSError as e:
            if temp_path is not None:
                with suppress(OSError):
                    temp_path.unlink()
            raise StorageError(f"cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = str(value)
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def keys(self) -> List[str]:
        return sorted(self._read())


def open_storage(cfg: Dict[str, Any]) -> KeyValueStore:
    """Build the store configured under cfg["storage"]."""
    st = cfg.get("storage", {})
    backend = st.get("backend", "file")
    if backend not in BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend}")
    if backend == "memory":
        return MemoryStorage()
    return LocalStorage(st.get("path", "./.bitvoyager/local_storage.json"))
