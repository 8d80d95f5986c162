from retro15.engine.gamesession.commands import (
    ChangeSize,
    Command,
    GameView,
    Move,
    Reset,
    Shuffle,
    TileView,
    ToggleMark,
    WinNotice,
)
from retro15.engine.gamesession.controller import GameController

__all__ = [
    "ChangeSize",
    "Command",
    "GameController",
    "GameView",
    "Move",
    "Reset",
    "Shuffle",
    "TileView",
    "ToggleMark",
    "WinNotice",
]
