"""Commands accepted by the game controller and the views it returns."""

from __future__ import annotations

from dataclasses import dataclass, field

from retro15.models.board import Direction


# -- commands -----------------------------------------------------------------


@dataclass(frozen=True)
class Move:
    """Slide a tile: a cell index (click) or a blank direction (key)."""

    target: int | Direction


@dataclass(frozen=True)
class Shuffle:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class ChangeSize:
    size: int


@dataclass(frozen=True)
class ToggleMark:
    value: int


Command = Move | Shuffle | Reset | ChangeSize | ToggleMark


# -- views --------------------------------------------------------------------


@dataclass(frozen=True)
class TileView:
    index: int
    value: int
    marked: bool
    correct: bool

    @property
    def is_blank(self) -> bool:
        return self.value == 0


@dataclass(frozen=True)
class WinNotice:
    elapsed_ms: int
    elapsed_text: str
    moves: int
    new_best: bool


@dataclass(frozen=True)
class GameView:
    size: int
    cells: tuple[int, ...]
    moves: int
    active: bool
    elapsed_ms: int
    elapsed_text: str
    best_time_ms: int | None
    best_time_text: str
    tiles: tuple[TileView, ...] = field(default_factory=tuple)
    accepted: bool = True
    message: str | None = None
    win: WinNotice | None = None

    @property
    def moves_text(self) -> str:
        return f"{self.moves:03d}"
