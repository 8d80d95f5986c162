"""Retro 15 sliding puzzle.

Usage::

    python -m retro15                # resume the last session
    python -m retro15 -s 5           # 5×5 board
    python -m retro15 --best         # view best times
    python -m retro15 --reset-session
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import rich.box
import typer
from rich.console import Console
from rich.table import Table

from retro15.config import DATA_DIR, DEFAULT_SIZE, SUPPORTED_SIZES, GameConfig
from retro15.engine.gamesession import GameController
from retro15.engine.gametimer import format_time
from retro15.storage import JsonFileStore, SessionStore

console = Console()


# -- helpers ------------------------------------------------------------------


def _configure_logging(config: GameConfig, level: str) -> None:
    config.data_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.FileHandler(config.log_path, encoding="utf-8")],
    )


def _session_store(config: GameConfig) -> SessionStore:
    return SessionStore(
        JsonFileStore(config.storage_path),
        config.supported_sizes,
        key_prefix=config.key_prefix,
    )


def _print_best_times(sessions: SessionStore) -> None:
    table = Table(title="BEST  TIMES", box=rich.box.ROUNDED, border_style="dim")
    table.add_column("Size", style="bold cyan")
    table.add_column("Time", justify="right", style="yellow")
    for size, ms in sessions.best_times().items():
        table.add_row(f"{size}×{size}", format_time(ms))
    if not table.row_count:
        console.print("  No best times yet.")
        return
    console.print(table)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    size: Optional[int] = typer.Option(
        None, "-s", "--size",
        envvar="RETRO15_SIZE",
        help=f"Board size ({', '.join(map(str, SUPPORTED_SIZES))}). "
        "Omit to resume the saved session.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        envvar="RETRO15_DATA_DIR",
        help="Directory for saved sessions, best times and the log file.",
    ),
    best: bool = typer.Option(
        False, "--best",
        help="Show best times and exit.",
    ),
    reset_session: bool = typer.Option(
        False, "--reset-session",
        help="Discard the saved session and exit.",
    ),
    log_level: str = typer.Option(
        "INFO", "--log-level",
        help="Log level for the log file.",
    ),
) -> None:
    """Retro 15 sliding puzzle."""
    if size is not None and size not in SUPPORTED_SIZES:
        raise typer.BadParameter(
            f"must be one of {', '.join(map(str, SUPPORTED_SIZES))}",
            param_hint="--size",
        )

    config = GameConfig(default_size=DEFAULT_SIZE, data_dir=data_dir)
    _configure_logging(config, log_level)
    sessions = _session_store(config)

    if best:
        _print_best_times(sessions)
        return

    if reset_session:
        sessions.clear()
        console.print("  Saved session discarded.")
        return

    from retro15.frontend import app as frontend

    frontend.run(GameController(config, sessions), size=size)


if __name__ == "__main__":
    app()
