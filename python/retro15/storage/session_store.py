"""Session snapshot and best-time persistence."""

from __future__ import annotations

import json
import logging
import math
from enum import StrEnum
from typing import Any, Iterable

from retro15.models.board import validate_cells
from retro15.models.snapshot import SessionSnapshot
from retro15.storage.kvstore import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

# Counters and durations above this are treated as unset.
MAX_STORED_NUMBER = 2**53 - 1


class StorageStatus(StrEnum):
    OK = "ok"
    MISSING = "missing"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    CORRUPT_DATA = "corrupt_data"


class CorruptSnapshot(ValueError):
    pass


# -- field parsing ------------------------------------------------------------


def _as_int(value: Any) -> int | None:
    """Parse a stored number.  Returns None if it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def _as_duration(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        value = int(value)
    if value < 0 or value > MAX_STORED_NUMBER:
        return 0
    return value


def _as_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return 0
        value = int(value)
    if value < 0 or value > MAX_STORED_NUMBER:
        return 0
    return value


def _as_marks(value: Any, size: int) -> set[int]:
    if not isinstance(value, list):
        return set()
    marks: set[int] = set()
    for item in value:
        number = _as_int(item)
        if number is not None and 0 < number < size * size:
            marks.add(number)
    return marks


def parse_snapshot(data: Any, supported_sizes: Iterable[int]) -> SessionSnapshot:
    """Validate a decoded payload.  Raises ``CorruptSnapshot`` on bad data."""
    supported = set(supported_sizes)
    if not isinstance(data, dict):
        raise CorruptSnapshot("payload is not an object")

    raw_board = data.get("board")
    if not isinstance(raw_board, list):
        raise CorruptSnapshot("board is not a list")
    board = [_as_int(v) for v in raw_board]
    if any(v is None for v in board):
        raise CorruptSnapshot("board holds a non-numeric cell")

    derived = math.isqrt(len(board))
    if derived * derived != len(board) or derived not in supported:
        raise CorruptSnapshot(f"board of {len(board)} cells has no supported size")

    size = derived
    if "size" in data:
        stored = _as_int(data["size"])
        if stored is None or stored not in supported:
            raise CorruptSnapshot(f"unsupported size {data['size']!r}")
        size = stored
    if len(board) != size * size:
        raise CorruptSnapshot(f"expected {size * size} cells, got {len(board)}")

    try:
        validate_cells(size, board)
    except ValueError as exc:
        raise CorruptSnapshot(str(exc)) from exc

    return SessionSnapshot(
        board=board,
        size=size,
        moves=_as_count(data.get("moves")),
        active=bool(data.get("active")),
        elapsed_ms=_as_duration(data.get("elapsed_ms")),
        timer_running=bool(data.get("timer_running")),
        marked=_as_marks(data.get("marked"), size),
    )


# -- store --------------------------------------------------------------------


class SessionStore:
    """Persists the in-progress session and one best time per board size."""

    def __init__(
        self,
        store: KeyValueStore,
        supported_sizes: Iterable[int],
        key_prefix: str = "retro15",
    ) -> None:
        self.store = store
        self.supported_sizes = tuple(supported_sizes)
        self.key_prefix = key_prefix

    @property
    def session_key(self) -> str:
        return f"{self.key_prefix}-save"

    def best_time_key(self, size: int) -> str:
        return f"{self.key_prefix}-best-time-{size}"

    # -- session --------------------------------------------------------------

    def save(self, snapshot: SessionSnapshot) -> StorageStatus:
        try:
            self.store.set(self.session_key, json.dumps(snapshot.to_dict()))
        except StorageError as exc:
            logger.debug("Session not saved: %s", exc)
            return StorageStatus.STORAGE_UNAVAILABLE
        return StorageStatus.OK

    def load(self) -> tuple[StorageStatus, SessionSnapshot | None]:
        try:
            raw = self.store.get(self.session_key)
        except StorageError as exc:
            logger.debug("Session not read: %s", exc)
            return StorageStatus.STORAGE_UNAVAILABLE, None
        if raw is None:
            return StorageStatus.MISSING, None
        try:
            snapshot = parse_snapshot(json.loads(raw), self.supported_sizes)
        except (ValueError, OverflowError, RecursionError) as exc:
            logger.debug("Session discarded: %s", exc)
            return StorageStatus.CORRUPT_DATA, None
        return StorageStatus.OK, snapshot

    def restore(self) -> SessionSnapshot | None:
        return self.load()[1]

    def clear(self) -> StorageStatus:
        try:
            self.store.remove(self.session_key)
        except StorageError:
            return StorageStatus.STORAGE_UNAVAILABLE
        return StorageStatus.OK

    # -- best times -----------------------------------------------------------

    def load_best_time(self, size: int) -> int | None:
        try:
            raw = self.store.get(self.best_time_key(size))
        except StorageError:
            return None
        if raw is None:
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return int(value)

    def save_best_time(self, size: int, ms: int) -> bool:
        """Record *ms* if it beats the stored best.  Returns True if stored."""
        if ms <= 0:
            return False
        current = self.load_best_time(size)
        if current is not None and ms >= current:
            return False
        try:
            self.store.set(self.best_time_key(size), str(int(ms)))
        except StorageError as exc:
            logger.debug("Best time not saved: %s", exc)
            return False
        return True

    def best_times(self) -> dict[int, int]:
        times: dict[int, int] = {}
        for size in self.supported_sizes:
            best = self.load_best_time(size)
            if best is not None:
                times[size] = best
        return times
