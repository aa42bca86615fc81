"""
Shared type definitions for the voidbreaker grid.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


GRID_COLS = 4
GRID_ROWS = 6
ARENA_COLS = 4
ARENA_ROWS = 2


class Direction(Enum):
    """Cardinal direction for a move."""

    N = "N"  # Up (decreasing y)
    S = "S"  # Down (increasing y)
    E = "E"  # Right (increasing x)
    W = "W"  # Left (decreasing x)


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
}


class CellKind(Enum):
    """What occupies a cell. The four elements cycle in value order."""

    FIRE = 0
    WATER = 1
    EARTH = 2
    AIR = 3
    BOSS = 4
    VOID = 5  # Reserved, never placed during play


ELEMENTAL_KINDS: tuple[CellKind, ...] = (
    CellKind.FIRE,
    CellKind.WATER,
    CellKind.EARTH,
    CellKind.AIR,
)


class GameMode(Enum):
    """Top-level mode of the game loop."""

    EXPLORE = "explore"
    ARENA = "arena"


@dataclass(frozen=True)
class Coordinate:
    """A grid square, x across columns and y down rows."""

    x: int
    y: int

    def step(self, direction: Direction) -> Coordinate:
        dx, dy = _DELTAS[direction]
        return Coordinate(self.x + dx, self.y + dy)


# Cosmetic tags for ordinary cells; no game rule reads them
DECOR_TAGS: tuple[str, ...] = (
    "atom", "binary", "brain", "circuitry", "cpu",
    "database", "eye", "fingerprint", "flask", "gauge",
    "gear", "globe", "hexagon", "infinity",
    "intersect", "key", "microscope", "navigation-arrow",
    "orbit", "pentagon", "polygon", "radioactive", "rows",
    "squares-four", "terminal-window", "tree-structure", "waves",
)
