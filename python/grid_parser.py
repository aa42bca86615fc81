"""
Text format for spiral grid layouts.

Used to write exact layouts in tests and to dump a grid to the debug log.
"""

from __future__ import annotations

from grid_state import Cell, GridState
from spiral_path import slot_count
from spiral_types import CellKind

__all__ = ["parse_slots", "format_slots"]


_KIND_LETTERS: dict[str, CellKind] = {
    "F": CellKind.FIRE,
    "W": CellKind.WATER,
    "E": CellKind.EARTH,
    "A": CellKind.AIR,
}
_LETTER_FOR_KIND: dict[CellKind, str] = {kind: letter for letter, kind in _KIND_LETTERS.items()}


def parse_slots(definition: str, stage: int = 1) -> GridState:
    """
    Parse a layout listing one token per ring slot, in slot order.

    Format:
    - Tokens separated by any whitespace (newlines allowed), exactly one per slot
    - Token meaning:
      * '_': Empty slot
      * '@' or '@<level>': Player cell (level defaults to 1, kind FIRE)
      * 'B<level>': Boss cell, e.g. "B5"
      * '<F|W|E|A><level>': Elemental cell, e.g. "W2" is a level 2 water cell
      * A trailing '+' on any non-empty token marks the cell revealed, e.g. "E1+"

    Example:
        "@ F1 W1 E1 A1 F2 W2 E2 A2 B5 _ _ _ _ _ _ _ _ _ _ _ _ _ _"
        Player on slot 0, eight elemental cells on slots 1-8, boss on slot 9,
        the rest empty.

    Cell ids are "slot<N>" after the slot the token was read for.

    Args:
        definition: Layout string
        stage: Stage number recorded on the resulting state

    Returns:
        GridState with the parsed cells
    """
    tokens = definition.split()
    if len(tokens) != slot_count():
        error_msg = (
            f"Layout has {len(tokens)} tokens, expected {slot_count()}\n"
            f"  Layout: \"{' '.join(tokens)}\"\n"
            f"  Give exactly one token per ring slot ('_' for an empty slot)"
        )
        raise ValueError(error_msg)

    cells: list[Cell] = []
    for slot, token in enumerate(tokens):
        if token == "_":
            continue

        revealed = token.endswith("+")
        body = token[:-1] if revealed else token
        head, level_str = body[:1], body[1:]

        if level_str and not level_str.isdecimal():
            head = ""  # Falls through to the error below

        level = int(level_str) if level_str.isdecimal() else 1
        cell_id = f"slot{slot}"

        if head == "@":
            cells.append(Cell(cell_id, CellKind.FIRE, level, slot, is_player=True, is_revealed=True))
        elif head == "B" and level_str:
            cells.append(Cell(cell_id, CellKind.BOSS, level, slot, is_boss=True, is_revealed=True))
        elif head in _KIND_LETTERS and level_str:
            cells.append(Cell(cell_id, _KIND_LETTERS[head], level, slot, is_revealed=revealed))
        else:
            error_msg = (
                f"Invalid slot token: '{token}'\n"
                f"  Slot: {slot}\n"
                f"  Valid formats:\n"
                f"    - '_': Empty slot\n"
                f"    - '@' or '@<level>': Player (e.g., '@', '@3')\n"
                f"    - 'B<level>': Boss (e.g., 'B5')\n"
                f"    - '<F|W|E|A><level>': Elemental cell (e.g., 'F1', 'A2')\n"
                f"    - Optional trailing '+': Revealed (e.g., 'W2+')"
            )
            raise ValueError(error_msg)

    return GridState.from_cells(stage, cells)


def format_slots(state: GridState) -> str:
    """Render a state back into the layout format (ids and decorations are dropped)."""
    tokens: list[str] = []
    for cell in state.slots:
        if cell is None:
            tokens.append("_")
        elif cell.is_player:
            tokens.append(f"@{cell.level}")
        elif cell.is_boss:
            tokens.append(f"B{cell.level}")
        else:
            letter = _LETTER_FOR_KIND.get(cell.kind, "?")
            tokens.append(f"{letter}{cell.level}{'+' if cell.is_revealed else ''}")
    return " ".join(tokens)
