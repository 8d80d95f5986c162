"""Local key-value storage backends.

Both backends hold string values under string keys and raise
``StorageError`` when a read or write cannot be carried out.
"""

from __future__ import annotations

import contextlib
import json
from pathlib import Path
from typing import Protocol


class StorageError(Exception):
    """The backend could not read or write (disabled, full, I/O failure)."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store with an optional size quota."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(
                len(k) + len(v) for k, v in self._data.items() if k != key
            )
            if used + len(key) + len(value) > self.quota_bytes:
                raise StorageError(f"Quota of {self.quota_bytes} bytes exceeded.")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Loads and saves all keys as one JSON object on disk."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath

    # -- persistence ----------------------------------------------------------

    def _load(self) -> dict[str, str]:
        if not self.filepath.exists():
            return {}
        try:
            data = json.loads(self.filepath.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageError(f"Cannot read {self.filepath}: {exc}") from exc
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        # Written beside the target, then renamed over it.
        tmp = self.filepath.with_name(self.filepath.name + ".tmp")
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(data, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
            tmp.replace(self.filepath)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self.filepath}: {exc}") from exc

    # -- queries --------------------------------------------------------------

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
