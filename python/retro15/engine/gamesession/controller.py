"""Game controller — owns the session and applies commands to it.

Every external event arrives as a command through ``submit``; the
controller mutates the board, timer and marks, persists the session and
returns a ``GameView`` for the view layer.  Nothing else holds a
reference to the mutable state.
"""

from __future__ import annotations

import logging

from retro15.config import GameConfig
from retro15.engine.gamegenerator import SolvableShuffler
from retro15.engine.gameplay import MoveEngine, Moved
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
from retro15.engine.gamestate import GameState
from retro15.engine.gametimer import BEST_TIME_SENTINEL, TimerController, format_time
from retro15.engine.gametimer.timer import Clock, TickCallback
from retro15.models.board import Board, Direction
from retro15.models.snapshot import SessionSnapshot
from retro15.storage import SessionStore, StorageStatus

logger = logging.getLogger(__name__)


class GameController:
    """Orchestrates one game session."""

    def __init__(
        self,
        config: GameConfig,
        sessions: SessionStore,
        *,
        shuffler: SolvableShuffler | None = None,
        clock: Clock | None = None,
        on_tick: TickCallback | None = None,
    ) -> None:
        self.config = config
        self.sessions = sessions
        self.shuffler = shuffler or SolvableShuffler(
            max_attempts=config.max_shuffle_attempts
        )
        self.timer = TimerController(
            clock=clock,
            tick_interval_ms=config.tick_interval_ms,
            on_tick=on_tick,
        )
        self.state = GameState(Board.solved(config.default_size))
        self._best_ms = sessions.load_best_time(config.default_size)

    @property
    def size(self) -> int:
        return self.state.size

    # -- lifecycle ------------------------------------------------------------

    def restore(self) -> bool:
        """Load the saved session.  Returns False if a fresh one was started."""
        status, snapshot = self.sessions.load()
        if status == StorageStatus.CORRUPT_DATA:
            logger.warning("Saved session is corrupt; starting a new one")
        elif status == StorageStatus.STORAGE_UNAVAILABLE:
            logger.warning("Storage unavailable; starting a new session")

        if snapshot is None:
            self._new_idle(self.size)
            return False

        self.timer.stop(reset_display=True)
        self.state = GameState(Board(size=snapshot.size, cells=list(snapshot.board)))
        self.state.moves = snapshot.moves
        self.state.active = snapshot.active and not self.state.is_solved
        self.state.marked = set(snapshot.marked)
        self.timer.set_base(snapshot.elapsed_ms)
        if snapshot.timer_running and self.state.active:
            self.timer.resume()
        self._best_ms = self.sessions.load_best_time(self.size)
        logger.info(
            "Restored %d×%d session (%d moves, active=%s)",
            self.size, self.size, self.state.moves, self.state.active,
        )
        return True

    def teardown(self) -> None:
        """Persist the session and cancel the timer's tick task."""
        self._save()
        self.timer.stop()

    # -- commands -------------------------------------------------------------

    def submit(self, command: Command) -> GameView:
        if isinstance(command, Move):
            return self._move(command.target)
        if isinstance(command, Shuffle):
            return self._shuffle()
        if isinstance(command, Reset):
            return self._reset()
        if isinstance(command, ChangeSize):
            return self._change_size(command.size)
        if isinstance(command, ToggleMark):
            return self._toggle_mark(command.value)
        raise TypeError(f"Unknown command: {command!r}")

    def poll(self) -> bool:
        """Drive the timer's display tick.  Call from the owning loop."""
        return self.timer.poll()

    def _move(self, target: int | Direction) -> GameView:
        if isinstance(target, Direction):
            result = MoveEngine.slide(self.state, target)
        elif isinstance(target, int) and not isinstance(target, bool):
            result = MoveEngine.try_move(self.state, target)
        else:
            return self.view(accepted=False)

        if not isinstance(result, Moved):
            logger.debug("Move to %r rejected: %s", target, result.reason)
            return self.view(accepted=False)

        if not result.won:
            self._save()
            return self.view()

        elapsed = self.timer.stop()
        self.state.active = False
        new_best = self._record_best(elapsed)
        self._save()
        win = WinNotice(
            elapsed_ms=elapsed,
            elapsed_text=format_time(elapsed),
            moves=self.state.moves,
            new_best=new_best,
        )
        logger.info(
            "Solved %d×%d in %s with %d moves",
            self.size, self.size, win.elapsed_text, win.moves,
        )
        return self.view(message=f"Solved in {win.elapsed_text}.", win=win)

    def _shuffle(self) -> GameView:
        self.state = GameState(self.shuffler.generate(self.size))
        self.state.active = True
        self.timer.stop(reset_display=True)
        self.timer.start()
        self._save()
        return self.view(message="Shuffled. Good luck!")

    def _reset(self) -> GameView:
        self._new_idle(self.size)
        self._save()
        return self.view(message="Reset.")

    def _change_size(self, size: int) -> GameView:
        if (
            not isinstance(size, int)
            or isinstance(size, bool)
            or size not in self.config.supported_sizes
        ):
            logger.debug("Ignoring unsupported size %r", size)
            return self.view(accepted=False)
        if size == self.size:
            return self.view()
        self._new_idle(size)
        self._save()
        return self.view(message=f"Board size {size}×{size}.")

    def _toggle_mark(self, value: int) -> GameView:
        if not self.state.toggle_mark(value):
            return self.view(accepted=False)
        self._save()
        return self.view()

    # -- outputs --------------------------------------------------------------

    def view(
        self,
        *,
        accepted: bool = True,
        message: str | None = None,
        win: WinNotice | None = None,
    ) -> GameView:
        board = self.state.board
        leading = board.leading_correct_count()
        tiles = tuple(
            TileView(
                index=i,
                value=v,
                marked=v in self.state.marked,
                correct=v != 0 and i < leading,
            )
            for i, v in enumerate(board.cells)
        )
        elapsed = self.timer.get_elapsed()
        return GameView(
            size=board.size,
            cells=tuple(board.cells),
            moves=self.state.moves,
            active=self.state.active,
            elapsed_ms=elapsed,
            elapsed_text=format_time(elapsed),
            best_time_ms=self._best_ms,
            best_time_text=(
                format_time(self._best_ms)
                if self._best_ms is not None
                else BEST_TIME_SENTINEL
            ),
            tiles=tiles,
            accepted=accepted,
            message=message,
            win=win,
        )

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            board=list(self.state.board.cells),
            size=self.size,
            moves=self.state.moves,
            active=self.state.active,
            elapsed_ms=self.timer.get_elapsed(),
            timer_running=self.timer.running,
            marked=set(self.state.marked),
        )

    # -- helpers --------------------------------------------------------------

    def _new_idle(self, size: int) -> None:
        self.state = GameState(Board.solved(size))
        self.timer.stop(reset_display=True)
        self._best_ms = self.sessions.load_best_time(size)

    def _record_best(self, elapsed: int) -> bool:
        if elapsed <= 0:
            return False
        if self._best_ms is not None and elapsed >= self._best_ms:
            return False
        self._best_ms = elapsed
        if not self.sessions.save_best_time(self.size, elapsed):
            logger.warning("Best time for %d×%d not persisted", self.size, self.size)
        return True

    def _save(self) -> None:
        status = self.sessions.save(self.snapshot())
        if status != StorageStatus.OK:
            logger.warning("Session not saved (%s); continuing unpersisted", status)
