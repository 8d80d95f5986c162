"""Persisted record of a game session."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SessionSnapshot:
    board: list[int]
    size: int
    moves: int = 0
    active: bool = False
    elapsed_ms: int = 0
    timer_running: bool = False
    marked: set[int] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "board": list(self.board),
            "size": self.size,
            "moves": self.moves,
            "active": self.active,
            "elapsed_ms": self.elapsed_ms,
            "timer_running": self.timer_running,
            "marked": sorted(self.marked),
        }
