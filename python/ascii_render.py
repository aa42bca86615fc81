"""
Text rendering of the grid and the arena for terminal front-ends.
"""

from __future__ import annotations

from typing import Callable

from simple_chalk import chalk  # type: ignore[import-untyped]

from encounter import ArenaPlacement, EncounterPhase
from grid_state import Cell
from spiral_path import path_at
from spiral_types import ARENA_COLS, GRID_COLS, GRID_ROWS, CellKind, Coordinate, GameMode
from voidbreaker import GameSnapshot

__all__ = ["cell_label", "render_grid", "render_arena", "render_status", "render_snapshot"]


_KIND_COLORS: dict[CellKind, Callable[[str], str]] = {
    CellKind.FIRE: chalk.red,
    CellKind.WATER: chalk.blue,
    CellKind.EARTH: chalk.green,
    CellKind.AIR: chalk.magenta,
    CellKind.BOSS: chalk.redBright,
    CellKind.VOID: chalk.white,
}

_KIND_LETTERS: dict[CellKind, str] = {
    CellKind.FIRE: "F",
    CellKind.WATER: "W",
    CellKind.EARTH: "E",
    CellKind.AIR: "A",
    CellKind.BOSS: "B",
    CellKind.VOID: "?",
}

_PHASE_CAPTIONS: dict[EncounterPhase, str] = {
    EncounterPhase.FACE_OFF: "Syncing",
    EncounterPhase.CLASH: "Pressure",
    EncounterPhase.SUSPENSE: "Deciding",
    EncounterPhase.VICTORY: "Sync Complete",
    EncounterPhase.DEFEAT: "Sync Failed",
}


def cell_label(cell: Cell) -> str:
    """Plain (uncoloured) label: '@' + level for the player, '??' while hidden."""
    if cell.is_player:
        return f"@{cell.level}"
    if cell.is_boss or cell.is_revealed:
        return f"{_KIND_LETTERS[cell.kind]}{cell.level}"
    return "??"


def _colorize(cell: Cell, content: str) -> str:
    if cell.is_player:
        return chalk.bgWhite.black(content)
    if not (cell.is_boss or cell.is_revealed):
        return chalk.white(content)
    return _KIND_COLORS[cell.kind](content)


def render_grid(cells: tuple[Cell, ...], cell_width: int = 4) -> str:
    """
    Draw the 4x6 grid with one label per square.

    Empty squares show as '·'. Each square is cell_width characters wide.
    """
    by_position = {path_at(cell.slot): cell for cell in cells}
    lines = ["┌" + "─" * (GRID_COLS * cell_width) + "┐"]
    for y in range(GRID_ROWS):
        parts = ["│"]
        for x in range(GRID_COLS):
            cell = by_position.get(Coordinate(x, y))
            if cell is None:
                parts.append("·".center(cell_width))
            else:
                parts.append(_colorize(cell, cell_label(cell).center(cell_width)))
        parts.append("│")
        lines.append("".join(parts))
    lines.append("└" + "─" * (GRID_COLS * cell_width) + "┘")
    return "\n".join(lines)


def render_arena(
    placements: tuple[ArenaPlacement, ...], phase: EncounterPhase, cell_width: int = 4
) -> str:
    """Draw the arena: combatants on the centre line between its two rows."""
    line = [" " * cell_width for _ in range(ARENA_COLS)]
    for placement in placements:
        column = int(placement.x)
        line[column] = _colorize(placement.cell, cell_label(placement.cell).center(cell_width))

    width = ARENA_COLS * cell_width
    caption = _PHASE_CAPTIONS.get(phase, "")
    if phase == EncounterPhase.VICTORY:
        caption = chalk.green(caption.center(width))
    elif phase == EncounterPhase.DEFEAT:
        caption = chalk.red(caption.center(width))
    else:
        caption = caption.center(width)

    return "\n".join([
        "┌" + "─" * width + "┐",
        "│" + " " * width + "│",
        "│" + "".join(line) + "│",
        "│" + " " * width + "│",
        "└" + "─" * width + "┘",
        " " + caption,
    ])


def render_status(snapshot: GameSnapshot) -> str:
    power = int(snapshot.player_power * 100)
    mode = "GRID_LOCKED" if snapshot.mode == GameMode.EXPLORE else "BATTLE_ACTIVE"
    return (
        f"Sector L-{snapshot.stage}  Level {snapshot.player_level}  "
        f"Efficiency {power}%  Turn {snapshot.turn}  {mode}"
    )


def render_snapshot(snapshot: GameSnapshot) -> str:
    """Status line followed by the grid or the arena, whichever is showing."""
    if snapshot.mode == GameMode.EXPLORE:
        body = render_grid(snapshot.cells)
    else:
        body = render_arena(snapshot.arena, snapshot.phase)
    return render_status(snapshot) + "\n" + body
