"""Shared fixtures: a controllable clock and in-memory storage."""

from __future__ import annotations

import random

import pytest

from retro15.config import GameConfig
from retro15.engine.gamegenerator import SolvableShuffler
from retro15.engine.gamesession import GameController
from retro15.storage import MemoryStore, SessionStore


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config(tmp_path) -> GameConfig:
    return GameConfig(data_dir=tmp_path)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sessions(store: MemoryStore, config: GameConfig) -> SessionStore:
    return SessionStore(store, config.supported_sizes)


@pytest.fixture
def controller(config: GameConfig, sessions: SessionStore, clock: FakeClock) -> GameController:
    return GameController(
        config,
        sessions,
        shuffler=SolvableShuffler(random.Random(7)),
        clock=clock,
    )
