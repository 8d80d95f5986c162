"""Game controller tests — command handling, state machine, persistence."""

from __future__ import annotations

import json
import random

import pytest

from retro15.config import GameConfig
from retro15.engine.gamegenerator import SolvableShuffler, is_solvable
from retro15.engine.gamesession import (
    ChangeSize,
    GameController,
    Move,
    Reset,
    Shuffle,
    ToggleMark,
)
from retro15.models.board import Board, Direction
from retro15.models.snapshot import SessionSnapshot
from retro15.storage import MemoryStore, SessionStore

BOARD_4x4 = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 13, 14, 15, 12]
BOARD_4x4_MID = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 0, 11, 13, 14, 15, 12]
BOARD_3x3 = [1, 2, 3, 4, 5, 6, 7, 0, 8]


# -- helpers ------------------------------------------------------------------


class _FixedShuffler(SolvableShuffler):
    """Always deals the same board."""

    def __init__(self, cells: list[int]) -> None:
        super().__init__(random.Random(0))
        self.cells = cells

    def shuffle(self, size: int) -> list[int]:
        return self.cells[:]


def _controller(config, sessions, clock, cells: list[int]) -> GameController:
    return GameController(config, sessions, shuffler=_FixedShuffler(cells), clock=clock)


def _stored(store: MemoryStore, sessions: SessionStore) -> dict:
    return json.loads(store.get(sessions.session_key))


# -- lifecycle ----------------------------------------------------------------


def test_fresh_controller_is_idle(controller: GameController) -> None:
    assert controller.restore() is False
    view = controller.view()
    assert view.size == 4
    assert list(view.cells) == Board.solved(4).cells
    assert view.moves == 0
    assert not view.active
    assert view.elapsed_text == "00:00"
    assert view.best_time_ms is None
    assert view.best_time_text == "--:--"


def test_corrupt_snapshot_falls_back_to_idle(controller, store, sessions) -> None:
    store.set(
        sessions.session_key,
        json.dumps({"board": BOARD_4x4[:15], "size": 4, "moves": 9, "active": True}),
    )
    assert controller.restore() is False
    view = controller.view()
    assert view.size == 4
    assert list(view.cells) == Board.solved(4).cells
    assert not view.active
    assert view.moves == 0


def test_restore_resumes_running_timer(config, sessions, clock) -> None:
    sessions.save(
        SessionSnapshot(
            board=BOARD_3x3[:],
            size=3,
            moves=7,
            active=True,
            elapsed_ms=65_000,
            timer_running=True,
            marked={2},
        )
    )
    controller = GameController(config, sessions, clock=clock)
    assert controller.restore() is True
    assert controller.timer.running

    clock.advance(5000)
    view = controller.view()
    assert view.size == 3
    assert view.moves == 7
    assert view.elapsed_ms == 70_000
    assert view.elapsed_text == "01:10"
    assert view.tiles[1].marked


@pytest.mark.parametrize(
    ("active", "timer_running"),
    [(True, False), (False, True), (False, False)],
)
def test_restore_keeps_timer_paused(config, sessions, clock, active, timer_running) -> None:
    sessions.save(
        SessionSnapshot(
            board=BOARD_3x3[:],
            size=3,
            active=active,
            elapsed_ms=4000,
            timer_running=timer_running,
        )
    )
    controller = GameController(config, sessions, clock=clock)
    controller.restore()
    clock.advance(10_000)
    assert not controller.timer.running
    assert controller.view().elapsed_ms == 4000


def test_restore_loads_best_time_for_restored_size(config, sessions, clock) -> None:
    sessions.save_best_time(3, 12_000)
    sessions.save_best_time(4, 99_000)
    sessions.save(SessionSnapshot(board=BOARD_3x3[:], size=3))
    controller = GameController(config, sessions, clock=clock)
    controller.restore()
    assert controller.view().best_time_text == "00:12"


def test_teardown_saves_running_session(config, store, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4)
    controller.submit(Shuffle())
    clock.advance(3000)
    controller.teardown()

    data = _stored(store, sessions)
    assert data["elapsed_ms"] == 3000
    assert data["timer_running"] is True
    assert not controller.timer.running


# -- shuffle / move / win -----------------------------------------------------


def test_shuffle_starts_game(controller: GameController, store, sessions) -> None:
    view = controller.submit(Shuffle())
    assert view.active
    assert view.moves == 0
    assert view.message
    assert is_solvable(list(view.cells), 4)
    assert not Board(4, list(view.cells)).is_solved()
    assert controller.timer.running
    assert _stored(store, sessions)["active"] is True


def test_move_before_shuffle_is_ignored(controller: GameController) -> None:
    before = controller.view()
    view = controller.submit(Move(14))
    assert not view.accepted
    assert view.cells == before.cells
    assert view.moves == 0


def test_move_keeps_game_running(config, store, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4_MID)
    controller.submit(Shuffle())

    view = controller.submit(Move(11))
    assert view.accepted
    assert view.cells[10] == 11
    assert view.cells[11] == 0
    assert view.moves == 1
    assert view.win is None
    assert view.active
    assert _stored(store, sessions)["moves"] == 1


def test_last_tile_move_wins_4x4(config, store, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4)
    controller.submit(Shuffle())
    clock.advance(7000)

    view = controller.submit(Move(15))
    assert view.cells[11] == 12
    assert view.cells[15] == 0
    assert view.moves == 1
    assert view.win is not None
    assert view.win.elapsed_text == "00:07"
    assert not view.active
    assert _stored(store, sessions)["active"] is False


def test_rejected_move_is_not_persisted(config, store, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4)
    controller.submit(Shuffle())
    saved = store.get(sessions.session_key)
    before = controller.view()

    clock.advance(1000)
    view = controller.submit(Move(0))
    assert not view.accepted
    assert view.cells == before.cells
    assert view.moves == before.moves
    assert view.active == before.active
    assert store.get(sessions.session_key) == saved


@pytest.mark.parametrize("target", [True, "3", 2.0, None])
def test_malformed_move_targets_are_rejected(controller, target) -> None:
    controller.submit(Shuffle())
    assert not controller.submit(Move(target)).accepted


def test_winning_move_scenario_3x3(config, sessions, clock) -> None:
    config = GameConfig(default_size=3, data_dir=config.data_dir)
    controller = _controller(config, sessions, clock, BOARD_3x3)
    controller.submit(Shuffle())
    clock.advance(42_500)

    view = controller.submit(Move(8))
    assert list(view.cells) == [1, 2, 3, 4, 5, 6, 7, 8, 0]
    assert view.win is not None
    assert view.win.elapsed_ms == 42_500
    assert view.win.elapsed_text == "00:42"
    assert view.win.new_best
    assert view.message == "Solved in 00:42."
    assert not view.active
    assert not controller.timer.running
    assert view.best_time_ms == 42_500
    assert sessions.load_best_time(3) == 42_500

    # Won is terminal until a shuffle or reset.
    assert not controller.submit(Move(7)).accepted


def test_slower_win_keeps_best_time(config, sessions, clock) -> None:
    config = GameConfig(default_size=3, data_dir=config.data_dir)
    sessions.save_best_time(3, 10_000)
    controller = _controller(config, sessions, clock, BOARD_3x3)
    controller.restore()
    controller.submit(Shuffle())
    clock.advance(20_000)

    view = controller.submit(Move(Direction.RIGHT))
    assert view.win is not None
    assert not view.win.new_best
    assert view.best_time_ms == 10_000
    assert sessions.load_best_time(3) == 10_000


def test_direction_moves(config, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4_MID)
    controller.submit(Shuffle())

    view = controller.submit(Move(Direction.DOWN))
    assert view.accepted
    assert view.cells[14] == 0
    assert view.cells[10] == 15
    assert not controller.submit(Move(Direction.DOWN)).accepted
    view = controller.submit(Move(Direction.UP))
    assert view.cells[10] == 0
    assert view.moves == 2
    assert view.active


# -- reset / size / marks -----------------------------------------------------


def test_reset_returns_to_idle(controller: GameController, clock) -> None:
    controller.submit(Shuffle())
    controller.submit(ToggleMark(5))
    clock.advance(9000)

    view = controller.submit(Reset())
    assert list(view.cells) == Board.solved(4).cells
    assert view.moves == 0
    assert not view.active
    assert view.elapsed_ms == 0
    assert not any(t.marked for t in view.tiles)
    assert not controller.timer.running


def test_change_size(controller: GameController, sessions, store) -> None:
    sessions.save_best_time(5, 77_000)
    controller.submit(Shuffle())

    view = controller.submit(ChangeSize(5))
    assert view.size == 5
    assert list(view.cells) == Board.solved(5).cells
    assert not view.active
    assert view.best_time_ms == 77_000
    assert _stored(store, sessions)["size"] == 5


@pytest.mark.parametrize(
    "size",
    [2, 7, 0, -4, 5.0, True, "5", None],
    ids=["2", "7", "zero", "negative", "float", "bool", "str", "none"],
)
def test_unsupported_size_is_ignored(controller: GameController, size) -> None:
    controller.submit(Shuffle())
    before = controller.view()
    view = controller.submit(ChangeSize(size))
    assert not view.accepted
    assert view.size == 4
    assert view.cells == before.cells
    assert view.active


def test_same_size_keeps_game(controller: GameController) -> None:
    shuffled = controller.submit(Shuffle())
    view = controller.submit(ChangeSize(4))
    assert view.cells == shuffled.cells
    assert view.active


def test_toggle_mark(controller: GameController, store, sessions) -> None:
    view = controller.submit(ToggleMark(6))
    assert view.accepted
    assert [t.value for t in view.tiles if t.marked] == [6]
    assert _stored(store, sessions)["marked"] == [6]

    view = controller.submit(ToggleMark(6))
    assert not any(t.marked for t in view.tiles)

    assert not controller.submit(ToggleMark(0)).accepted
    assert not controller.submit(ToggleMark(16)).accepted


@pytest.mark.parametrize("value", [2.5, 3.0, True, "3", None])
def test_non_integer_mark_is_ignored(controller: GameController, store, sessions, value) -> None:
    view = controller.submit(ToggleMark(value))
    assert not view.accepted
    assert not any(t.marked for t in view.tiles)
    assert controller.state.marked == set()
    assert store.get(sessions.session_key) is None


def test_marks_survive_reload(config, sessions, clock) -> None:
    controller = _controller(config, sessions, clock, BOARD_4x4)
    controller.submit(Shuffle())
    controller.submit(ToggleMark(3))
    controller.submit(ToggleMark(12))

    reloaded = GameController(config, sessions, clock=clock)
    assert reloaded.restore()
    view = reloaded.view()
    assert {t.value for t in view.tiles if t.marked} == {3, 12}
    assert view.cells == controller.view().cells


def test_shuffle_clears_marks(controller: GameController) -> None:
    controller.submit(ToggleMark(1))
    view = controller.submit(Shuffle())
    assert not any(t.marked for t in view.tiles)


# -- view flags ---------------------------------------------------------------


def test_correct_so_far_flags(config, sessions, clock) -> None:
    cells = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 13, 14, 15, 12]
    controller = _controller(config, sessions, clock, cells)
    view = controller.submit(Shuffle())
    correct = [t.value for t in view.tiles if t.correct]
    assert correct == list(range(1, 12))
    assert view.moves_text == "000"


def test_storage_failure_does_not_interrupt_play(config, clock) -> None:
    sessions = SessionStore(MemoryStore(quota_bytes=20), config.supported_sizes)
    controller = _controller(config, sessions, clock, BOARD_4x4_MID)
    controller.submit(Shuffle())
    view = controller.submit(Move(11))
    assert view.accepted
    assert view.moves == 1
    assert view.active


def test_timer_ticks_through_controller(config, sessions, clock) -> None:
    ticks: list[int] = []
    controller = GameController(config, sessions, clock=clock, on_tick=ticks.append)
    controller.submit(Shuffle())
    ticks.clear()
    clock.advance(config.tick_interval_ms)
    assert controller.poll()
    assert ticks == [config.tick_interval_ms]
