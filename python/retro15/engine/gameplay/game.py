"""Core gameplay logic — validates moves and checks the win condition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from retro15.engine.gamestate import GameState
from retro15.models.board import Board, Direction, is_adjacent, matches_solved, swap


class RejectReason(StrEnum):
    INACTIVE = "inactive"
    OUT_OF_RANGE = "out_of_range"
    NOT_ADJACENT = "not_adjacent"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Moved:
    tile: int
    from_index: int
    to_index: int
    moves: int
    won: bool


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason


MoveResult = Moved | Rejected


class MoveEngine:
    """Stateless move rules — all methods are static."""

    @staticmethod
    def try_move(state: GameState, target_index: int) -> MoveResult:
        """Slide the tile at *target_index* into the adjacent blank.

        Rejected moves leave *state* untouched.
        """
        if not state.active:
            return Rejected(RejectReason.INACTIVE)

        board = state.board
        if not 0 <= target_index < len(board.cells):
            return Rejected(RejectReason.OUT_OF_RANGE)

        blank = board.blank_index
        if not is_adjacent(board.size, target_index, blank):
            return Rejected(RejectReason.NOT_ADJACENT)

        tile = board.cells[target_index]
        swap(board.cells, target_index, blank)
        state.increment_moves()
        return Moved(
            tile=tile,
            from_index=target_index,
            to_index=blank,
            moves=state.moves,
            won=MoveEngine.check_win(board.cells, board.solved_cells),
        )

    @staticmethod
    def slide(state: GameState, direction: Direction) -> MoveResult:
        """Move the blank one step in *direction*."""
        if not state.active:
            return Rejected(RejectReason.INACTIVE)
        target = MoveEngine.target_for(state.board, direction)
        if target is None:
            return Rejected(RejectReason.BLOCKED)
        return MoveEngine.try_move(state, target)

    @staticmethod
    def target_for(board: Board, direction: Direction) -> int | None:
        """Return the index of the tile that would slide into the blank.

        ``None`` when the blank sits on the edge it would have to cross.
        """
        size = board.size
        blank = board.blank_index
        row, col = divmod(blank, size)

        # UP    → tile above the blank moves down
        # DOWN  → tile below the blank moves up
        # LEFT  → tile left of the blank moves right
        # RIGHT → tile right of the blank moves left
        if direction == Direction.UP:
            return blank - size if row > 0 else None
        if direction == Direction.DOWN:
            return blank + size if row < size - 1 else None
        if direction == Direction.LEFT:
            return blank - 1 if col > 0 else None
        if direction == Direction.RIGHT:
            return blank + 1 if col < size - 1 else None
        return None

    @staticmethod
    def check_win(cells: list[int], solved: list[int]) -> bool:
        return matches_solved(cells, solved)
