"""
Authoritative cell collection for one stage.

A GridState is a fixed-size tuple indexed by ring slot, so two cells can never
share a slot. States are immutable: operations build and return new states.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from spiral_path import in_bounds, neighbors, path_at, slot_count, slot_of
from spiral_types import Coordinate, CellKind

logger = logging.getLogger(__name__)

__all__ = ["Cell", "GridState", "find_invariant_violations", "check_invariants", "reveal_around"]


@dataclass(frozen=True)
class Cell:
    """One occupant of the grid, bound to a ring slot."""

    id: str
    kind: CellKind
    level: int
    slot: int
    is_player: bool = False
    is_boss: bool = False
    is_revealed: bool = False
    decoration: str | None = None

    @property
    def coordinate(self) -> Coordinate:
        return path_at(self.slot)


@dataclass(frozen=True)
class GridState:
    """
    The cells of one stage, stored by ring slot.

    Attributes:
        stage: Stage number the grid was built for
        slots: One entry per ring slot; None marks an empty grid square
        next_serial: Counter used to give spawned cells fresh ids
    """

    stage: int
    slots: tuple[Cell | None, ...]
    next_serial: int = 0

    def __post_init__(self) -> None:
        if len(self.slots) != slot_count():
            raise ValueError(
                f"GridState needs exactly {slot_count()} slots, got {len(self.slots)}"
            )
        misplaced = [
            (index, cell.id, cell.slot)
            for index, cell in enumerate(self.slots)
            if cell is not None and cell.slot != index
        ]
        if misplaced:
            error_msg = "Cells stored under the wrong slot:\n"
            for index, cell_id, cell_slot in misplaced:
                error_msg += f"  slot {index}: cell '{cell_id}' claims slot {cell_slot}\n"
            raise ValueError(error_msg)

    @classmethod
    def from_cells(cls, stage: int, cells: Iterable[Cell], next_serial: int = 0) -> GridState:
        """Build a state from loose cells, rejecting slot collisions."""
        slots: list[Cell | None] = [None] * slot_count()
        for cell in cells:
            if not 0 <= cell.slot < slot_count():
                raise ValueError(f"cell '{cell.id}' has slot {cell.slot} outside the ring")
            existing = slots[cell.slot]
            if existing is not None:
                raise ValueError(
                    f"Duplicate slot {cell.slot}: cells '{existing.id}' and '{cell.id}'"
                )
            slots[cell.slot] = cell
        return cls(stage, tuple(slots), next_serial)

    @property
    def cells(self) -> tuple[Cell, ...]:
        """Occupied cells in slot order."""
        return tuple(cell for cell in self.slots if cell is not None)

    def occupant(self, slot: int) -> Cell | None:
        return self.slots[slot]

    def occupant_at(self, coord: Coordinate) -> Cell | None:
        if not in_bounds(coord):
            return None
        return self.slots[slot_of(coord)]

    @property
    def player(self) -> Cell | None:
        return next((cell for cell in self.slots if cell is not None and cell.is_player), None)

    @property
    def boss(self) -> Cell | None:
        return next((cell for cell in self.slots if cell is not None and cell.is_boss), None)

    def __len__(self) -> int:
        return sum(1 for cell in self.slots if cell is not None)


def reveal_around(state: GridState, coord: Coordinate) -> GridState:
    """Return a state where every cell orthogonally adjacent to coord is revealed."""
    slots = list(state.slots)
    revealed = []
    for near in neighbors(coord):
        slot = slot_of(near)
        cell = slots[slot]
        if cell is not None and not cell.is_revealed:
            slots[slot] = replace(cell, is_revealed=True)
            revealed.append(slot)

    if not revealed:
        return state
    logger.debug("reveal_around %s: slots %s", coord, revealed)
    return replace(state, slots=tuple(slots))


def find_invariant_violations(state: GridState) -> list[str]:
    """
    List every broken data-model invariant of a state.

    Checked:
    - each stored cell's slot matches its position and its coordinate is on the path
    - cell ids are unique
    - exactly one player cell
    - at most one boss cell
    - levels are positive
    """
    problems: list[str] = []

    for index, cell in enumerate(state.slots):
        if cell is None:
            continue
        if cell.slot != index:
            problems.append(f"cell '{cell.id}' stored at slot {index} but claims slot {cell.slot}")
            continue
        if cell.coordinate != path_at(index):
            problems.append(f"cell '{cell.id}' coordinate {cell.coordinate} != path_at({index})")
        if cell.level < 1:
            problems.append(f"cell '{cell.id}' has non-positive level {cell.level}")

    ids = [cell.id for cell in state.cells]
    duplicates = sorted({cell_id for cell_id in ids if ids.count(cell_id) > 1})
    if duplicates:
        problems.append(f"duplicate cell ids: {duplicates}")

    players = [cell for cell in state.cells if cell.is_player]
    if len(players) != 1:
        problems.append(f"expected exactly one player cell, found {len(players)}")

    bosses = [cell for cell in state.cells if cell.is_boss]
    if len(bosses) > 1:
        problems.append(f"expected at most one boss cell, found {len(bosses)}")

    return problems


def check_invariants(state: GridState) -> None:
    """Raise AssertionError describing every violated invariant, if any."""
    problems = find_invariant_violations(state)
    if problems:
        error_msg = f"Grid invariants violated (stage {state.stage}):\n"
        error_msg += "".join(f"  - {problem}\n" for problem in problems)
        raise AssertionError(error_msg)
