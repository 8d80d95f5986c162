"""Generates solvable sliding puzzle boards."""

from __future__ import annotations

import random

from retro15.models.board import Board, create_solved, matches_solved

DEFAULT_MAX_ATTEMPTS = 1000


def inversion_count(cells: list[int]) -> int:
    """Count pairs ``i < j`` of non-blank tiles with ``cells[i] > cells[j]``."""
    tiles = [v for v in cells if v]
    inversions = 0
    for i, a in enumerate(tiles):
        for b in tiles[i + 1 :]:
            if a > b:
                inversions += 1
    return inversions


def is_solvable(cells: list[int], size: int) -> bool:
    """Return True if *cells* can reach the goal state by sliding the blank.

    Odd sizes: the inversion count must be even.  Even sizes: the parity of
    the blank's row, counted from the bottom starting at 1, must differ from
    the parity of the inversion count.
    """
    inversions = inversion_count(cells)
    if size % 2:
        return inversions % 2 == 0
    blank_row_from_bottom = size - cells.index(0) // size
    return (blank_row_from_bottom % 2 == 0) == (inversions % 2 == 1)


class SolvableShuffler:
    """Creates solvable, unsolved puzzles by rejection sampling."""

    def __init__(
        self,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts

    def shuffle(self, size: int) -> list[int]:
        """Return a random *solvable* arrangement that is not already solved."""
        solved = create_solved(size)
        for _ in range(self.max_attempts):
            candidate = self._fisher_yates(solved[:])
            if is_solvable(candidate, size) and not matches_solved(candidate, solved):
                return candidate
        return self.fallback(size)

    def generate(self, size: int) -> Board:
        return Board(size=size, cells=self.shuffle(size))

    @staticmethod
    def fallback(size: int) -> list[int]:
        """Solved board with the blank slid one step left."""
        cells = create_solved(size)
        cells[-1], cells[-2] = cells[-2], cells[-1]
        return cells

    # -- helpers --------------------------------------------------------------

    def _fisher_yates(self, cells: list[int]) -> list[int]:
        for i in range(len(cells) - 1, 0, -1):
            j = self.rng.randint(0, i)
            cells[i], cells[j] = cells[j], cells[i]
        return cells
