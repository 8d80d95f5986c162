"""Rich terminal frontend — draws ``GameView`` snapshots and forwards keys.

All game rules live in the controller; this module only turns keypresses
into commands and views into panels.
"""

from __future__ import annotations

import sys

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from retro15.engine.gamesession import (
    ChangeSize,
    Command,
    GameController,
    GameView,
    Move,
    Reset,
    Shuffle,
    ToggleMark,
)
from retro15.frontend.input_handler import get_key_timeout, is_digit, read_number
from retro15.models.board import Direction

console = Console()

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


# -- input --------------------------------------------------------------------


def command_for_key(key: str, supported_sizes: tuple[int, ...]) -> Command | None:
    """Translate a normalised key into a controller command."""
    if key in _DIRECTIONS:
        return Move(_DIRECTIONS[key])
    if key == "shuffle":
        return Shuffle()
    if key == "reset":
        return Reset()
    if is_digit(key) and int(key) in supported_sizes:
        return ChangeSize(int(key))
    return None


def _ask_mark(controller: GameController) -> Command | None:
    """Read a tile number in place; Esc cancels without leaving the game."""
    sizes = controller.config.supported_sizes
    value = read_number(
        max_digits=len(str(controller.size * controller.size - 1)),
        on_change=lambda text: draw(
            controller.view(),
            sizes,
            f"[cyan]Mark tile #[/cyan] {text}_  [dim](Enter / Esc)[/dim]",
        ),
        idle=controller.poll,
        poll_seconds=controller.config.tick_interval_ms / 1000,
    )
    if value is None:
        return None
    return ToggleMark(value)


# -- board rendering ----------------------------------------------------------


def render_board(view: GameView) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(view.size * view.size - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(view.size):
        table.add_column(width=width + 1, justify="center")

    for r in range(view.size):
        cells: list[str] = []
        for tile in view.tiles[r * view.size : (r + 1) * view.size]:
            label = f"{tile.value:0{width}d}"
            if tile.is_blank:
                cells.append("[dim]·[/dim]")
            elif tile.marked:
                cells.append(f"[bold black on yellow]{label}[/bold black on yellow]")
            elif tile.correct:
                cells.append(f"[bold green]{label}[/bold green]")
            else:
                cells.append(f"[bold white]{label}[/bold white]")
        table.add_row(*cells)

    return table


def _stats(view: GameView) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(view.moves_text, style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(view.elapsed_text, style="bold yellow")
    stats.append("    Best: ", style="dim")
    stats.append(view.best_time_text, style="bold cyan")
    return stats


def _controls(sizes: tuple[int, ...]) -> Text:
    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("N", style="bold cyan")
    controls.append("  shuffle   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  reset   ", style="dim")
    controls.append("M", style="bold cyan")
    controls.append("  mark   ", style="dim")
    controls.append("/".join(map(str, sizes)), style="bold cyan")
    controls.append("  size   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  quit", style="dim")
    return controls


def draw(view: GameView, sizes: tuple[int, ...], status: str = "") -> None:
    console.clear()

    style = "bold green" if view.win else "bright_blue"
    body: list = [Align.center(render_board(view))]
    if view.win:
        congrats = Text()
        congrats.append("\n  ★ ", style="bold yellow")
        congrats.append("SOLVED", style="bold green")
        congrats.append(f"  in {view.win.elapsed_text}  ", style="green")
        if view.win.new_best:
            congrats.append("new best! ", style="bold cyan")
        congrats.append("★", style="bold yellow")
        body.append(Align.center(congrats))

    panel = Panel(
        Group(*body),
        title=f"[bold cyan]Retro 15  {view.size}×{view.size}[/bold cyan]",
        border_style=style,
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save the cursor so update_time() can repaint only the stats line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(view)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(sizes)))


def update_time(view: GameView) -> None:
    """Overwrite just the stats line using the saved cursor position."""
    line = _stats(view)
    pad = max(0, (console.width - line.cell_len) // 2)
    sys.stdout.write(f"\033[u\033[K{' ' * pad}{line.plain}")
    sys.stdout.flush()


# -- game loop ----------------------------------------------------------------


def _play(controller: GameController) -> None:
    sizes = controller.config.supported_sizes
    poll_seconds = controller.config.tick_interval_ms / 1000
    view = controller.view()
    status = ""

    while True:
        draw(view, sizes, status)
        status = ""

        # Poll with a short timeout so the clock keeps ticking.
        while True:
            key = get_key_timeout(poll_seconds)
            if key is not None:
                break
            controller.poll()

        if key in ("quit", "escape"):
            return
        command = _ask_mark(controller) if key == "mark" else command_for_key(key, sizes)
        if command is None:
            continue
        view = controller.submit(command)
        if view.message:
            status = f"[yellow]{view.message}[/yellow]"


# -- public entry point -------------------------------------------------------


def run(controller: GameController, size: int | None = None) -> None:
    """Restore the saved session and run the interactive loop.

    A *size* other than the restored one starts a fresh game of that size.
    """
    controller.timer.on_tick = lambda _ms: update_time(controller.view())
    restored = controller.restore()
    if size is not None and size != controller.size:
        controller.submit(ChangeSize(size))
        restored = False
    if not restored:
        controller.submit(Shuffle())
    try:
        _play(controller)
    finally:
        controller.teardown()
        console.clear()
        console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
