"""
The fixed spiral traversal of the 4x6 grid.

Slot 0 is the top-left corner; the path runs clockwise around the outer ring
and then the inner ring, ending near the centre. Every grid coordinate
appears exactly once, so slot <-> coordinate is a bijection.
"""

from __future__ import annotations

from spiral_types import GRID_COLS, GRID_ROWS, Coordinate

__all__ = ["SPIRAL_PATH", "path_at", "slot_count", "slot_of", "in_bounds", "neighbors"]


SPIRAL_PATH: tuple[Coordinate, ...] = (
    # Outer ring: top, right side, bottom, left side
    Coordinate(0, 0), Coordinate(1, 0), Coordinate(2, 0), Coordinate(3, 0),
    Coordinate(3, 1), Coordinate(3, 2), Coordinate(3, 3), Coordinate(3, 4), Coordinate(3, 5),
    Coordinate(2, 5), Coordinate(1, 5), Coordinate(0, 5),
    Coordinate(0, 4), Coordinate(0, 3), Coordinate(0, 2), Coordinate(0, 1),
    # Inner ring
    Coordinate(1, 1), Coordinate(2, 1),
    Coordinate(2, 2), Coordinate(2, 3), Coordinate(2, 4),
    Coordinate(1, 4),
    Coordinate(1, 3), Coordinate(1, 2),
)

_SLOT_BY_COORDINATE: dict[Coordinate, int] = {
    coord: slot for slot, coord in enumerate(SPIRAL_PATH)
}


def path_at(slot: int) -> Coordinate:
    """
    Coordinate of a ring slot.

    Raises:
        IndexError: if slot is outside [0, slot_count())
    """
    if not 0 <= slot < len(SPIRAL_PATH):
        raise IndexError(f"ring slot {slot} out of range [0, {len(SPIRAL_PATH)})")
    return SPIRAL_PATH[slot]


def slot_count() -> int:
    return len(SPIRAL_PATH)


def slot_of(coord: Coordinate) -> int:
    """Inverse of path_at. Raises ValueError for off-grid coordinates."""
    try:
        return _SLOT_BY_COORDINATE[coord]
    except KeyError:
        raise ValueError(f"{coord} is not on the {GRID_COLS}x{GRID_ROWS} grid") from None


def in_bounds(coord: Coordinate) -> bool:
    return 0 <= coord.x < GRID_COLS and 0 <= coord.y < GRID_ROWS


def neighbors(coord: Coordinate) -> list[Coordinate]:
    """In-bounds orthogonal neighbours, ordered right, left, down, up."""
    candidates = [
        Coordinate(coord.x + 1, coord.y),
        Coordinate(coord.x - 1, coord.y),
        Coordinate(coord.x, coord.y + 1),
        Coordinate(coord.x, coord.y - 1),
    ]
    return [c for c in candidates if in_bounds(c)]
