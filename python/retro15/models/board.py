"""Board model for the sliding puzzle game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Direction(StrEnum):
    """Where the *blank* travels.

    ``UP`` pulls the tile above the blank down into it.
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# -- flat-array helpers -------------------------------------------------------


def create_solved(size: int) -> list[int]:
    """Return the goal state ``[1, 2, ..., size²-1, 0]``."""
    count = size * size
    return [*range(1, count), 0]


def index_of(cells: list[int], value: int) -> int:
    return cells.index(value)


def is_adjacent(size: int, a: int, b: int) -> bool:
    """True if *a* and *b* are one row-step or one column-step apart.

    Neighbouring indices on different rows (end of one row, start of the
    next) are not adjacent.
    """
    row_a, col_a = divmod(a, size)
    row_b, col_b = divmod(b, size)
    return abs(row_a - row_b) + abs(col_a - col_b) == 1


def swap(cells: list[int], a: int, b: int) -> None:
    cells[a], cells[b] = cells[b], cells[a]


def matches_solved(cells: list[int], solved: list[int]) -> bool:
    return len(cells) == len(solved) and all(
        v == s for v, s in zip(cells, solved)
    )


def leading_correct_count(cells: list[int], solved: list[int]) -> int:
    """Length of the longest prefix already in goal order."""
    count = 0
    while count < len(cells) and count < len(solved) and cells[count] == solved[count]:
        count += 1
    return count


def validate_cells(size: int, cells: list[int]) -> None:
    """Raise ``ValueError`` unless *cells* is a permutation of ``0..size²-1``."""
    if size < 2:
        raise ValueError(f"Board size must be at least 2, got {size}.")
    if len(cells) != size * size:
        raise ValueError(
            f"Expected {size * size} tiles for a {size}×{size} board, "
            f"got {len(cells)}."
        )
    if sorted(cells) != list(range(size * size)):
        raise ValueError(
            f"Tiles must be a permutation of 0..{size * size - 1}."
        )


# -- board --------------------------------------------------------------------


@dataclass
class Board:
    """Represents the sliding puzzle board.

    Tiles are stored as a flat row-major list of ints. 0 represents the
    blank space.
    """

    size: int
    cells: list[int]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_flat(cls, size: int, flat: list[int]) -> Board:
        """Create a board from a flat row-major tile list.

        Example::

            Board.from_flat(3, [1, 2, 3, 4, 5, 6, 7, 0, 8])
        """
        cells = list(flat)
        validate_cells(size, cells)
        return cls(size=size, cells=cells)

    @classmethod
    def solved(cls, size: int) -> Board:
        """Return the goal-state board (all tiles in order, blank bottom-right)."""
        if size < 2:
            raise ValueError(f"Board size must be at least 2, got {size}.")
        return cls(size=size, cells=create_solved(size))

    # -- queries --------------------------------------------------------------

    @property
    def solved_cells(self) -> list[int]:
        return create_solved(self.size)

    @property
    def blank_index(self) -> int:
        return index_of(self.cells, 0)

    def is_solved(self) -> bool:
        """Check if all tiles are in their goal positions."""
        return matches_solved(self.cells, self.solved_cells)

    def leading_correct_count(self) -> int:
        return leading_correct_count(self.cells, self.solved_cells)
