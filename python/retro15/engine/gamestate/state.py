"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from retro15.models.board import Board


class GameState:
    """Holds the current board, move counter, active flag, and marked tiles."""

    def __init__(self, board: Board) -> None:
        self.board = board
        self.moves: int = 0
        self.active: bool = False
        self.marked: set[int] = set()

    @property
    def size(self) -> int:
        return self.board.size

    # -- moves ----------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves += 1

    @property
    def is_solved(self) -> bool:
        return self.board.is_solved()

    # -- marks ----------------------------------------------------------------

    def toggle_mark(self, value: int) -> bool:
        """Flip *value* in the marked set.  Returns False for non-tile values."""
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        if not 0 < value < self.size * self.size:
            return False
        if value in self.marked:
            self.marked.discard(value)
        else:
            self.marked.add(value)
        return True
