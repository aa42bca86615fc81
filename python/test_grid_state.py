"""
Tests for the slot-indexed grid state and its invariant checks.
"""

import pytest

from grid_parser import parse_slots
from grid_state import Cell, GridState, check_invariants, find_invariant_violations, reveal_around
from spiral_path import path_at
from spiral_types import CellKind, Coordinate
from test_support import full_layout


# =============================================================================
# Test Construction
# =============================================================================


class TestGridStateConstruction:
    """Tests for building GridState instances."""

    def test_from_cells(self) -> None:
        """Loose cells land in their own slots."""
        cells = [
            Cell("p", CellKind.FIRE, 1, 3, is_player=True),
            Cell("a", CellKind.AIR, 2, 10),
        ]
        state = GridState.from_cells(1, cells)
        assert state.occupant(3) == cells[0]
        assert state.occupant(10) == cells[1]
        assert len(state) == 2

    def test_duplicate_slot_rejected(self) -> None:
        """Two cells can never share a slot."""
        cells = [
            Cell("p", CellKind.FIRE, 1, 3, is_player=True),
            Cell("a", CellKind.AIR, 2, 3),
        ]
        with pytest.raises(ValueError, match="Duplicate slot 3"):
            GridState.from_cells(1, cells)

    def test_slot_outside_ring_rejected(self) -> None:
        """A cell slot must be a ring slot."""
        with pytest.raises(ValueError):
            GridState.from_cells(1, [Cell("x", CellKind.FIRE, 1, 24)])

    def test_wrong_length_rejected(self) -> None:
        """The slot tuple always has 24 entries."""
        with pytest.raises(ValueError, match="exactly 24"):
            GridState(1, (None,) * 23)

    def test_misplaced_cell_rejected(self) -> None:
        """A cell stored under another slot is a structural error."""
        slots: list[Cell | None] = [None] * 24
        slots[5] = Cell("x", CellKind.FIRE, 1, 6)
        with pytest.raises(ValueError, match="wrong slot"):
            GridState(1, tuple(slots))


# =============================================================================
# Test Lookups
# =============================================================================


class TestGridStateLookups:
    """Tests for cell lookup helpers."""

    def test_coordinate_follows_slot(self) -> None:
        """A cell's coordinate is always the path entry of its slot."""
        state = parse_slots(full_layout({0: "@", 12: "B5"}))
        for cell in state.cells:
            assert cell.coordinate == path_at(cell.slot)

    def test_occupant_at(self) -> None:
        """Lookup by coordinate goes through the spiral path."""
        state = parse_slots(full_layout({0: "@", 11: "W2"}))
        cell = state.occupant_at(Coordinate(0, 5))
        assert cell is not None
        assert cell.slot == 11
        assert cell.kind == CellKind.WATER

    def test_occupant_at_off_grid(self) -> None:
        """Off-grid lookups find nothing."""
        state = parse_slots(full_layout({0: "@"}))
        assert state.occupant_at(Coordinate(-1, 0)) is None
        assert state.occupant_at(Coordinate(0, 6)) is None

    def test_player_and_boss(self) -> None:
        """The player and boss are found by flag."""
        state = parse_slots(full_layout({4: "@", 9: "B5"}))
        assert state.player is not None and state.player.slot == 4
        assert state.boss is not None and state.boss.slot == 9

    def test_no_boss(self) -> None:
        """A grid may have no boss."""
        state = parse_slots(full_layout({4: "@"}))
        assert state.boss is None

    def test_cells_in_slot_order(self) -> None:
        """cells lists occupants by ascending slot."""
        state = parse_slots(full_layout({0: "@", 2: "A1", 7: "E2"}, default="_"))
        assert [cell.slot for cell in state.cells] == [0, 2, 7]


# =============================================================================
# Test Invariants
# =============================================================================


class TestInvariants:
    """Tests for find_invariant_violations and check_invariants."""

    def test_valid_layout(self) -> None:
        """A well-formed layout has no violations."""
        state = parse_slots(full_layout({0: "@", 12: "B5"}))
        assert find_invariant_violations(state) == []
        check_invariants(state)

    def test_two_players(self) -> None:
        """More than one player cell is a violation."""
        state = parse_slots(full_layout({0: "@", 1: "@"}))
        with pytest.raises(AssertionError, match="exactly one player"):
            check_invariants(state)

    def test_no_player(self) -> None:
        """A grid without a player is a violation."""
        state = parse_slots(full_layout({}))
        assert any("exactly one player" in p for p in find_invariant_violations(state))

    def test_two_bosses(self) -> None:
        """More than one boss is a violation."""
        state = parse_slots(full_layout({0: "@", 8: "B5", 9: "B5"}))
        assert any("at most one boss" in p for p in find_invariant_violations(state))

    def test_duplicate_ids(self) -> None:
        """Cell ids must be unique."""
        cells = [
            Cell("same", CellKind.FIRE, 1, 0, is_player=True),
            Cell("same", CellKind.AIR, 1, 1),
        ]
        state = GridState.from_cells(1, cells)
        assert any("duplicate cell ids" in p for p in find_invariant_violations(state))

    def test_non_positive_level(self) -> None:
        """Levels start at 1."""
        cells = [
            Cell("p", CellKind.FIRE, 1, 0, is_player=True),
            Cell("z", CellKind.AIR, 0, 1),
        ]
        state = GridState.from_cells(1, cells)
        assert any("non-positive level" in p for p in find_invariant_violations(state))


# =============================================================================
# Test Reveal
# =============================================================================


class TestRevealAround:
    """Tests for revealing cells next to a coordinate."""

    def test_reveals_only_neighbours(self) -> None:
        """Orthogonal neighbours become revealed; nothing else changes."""
        state = parse_slots(full_layout({0: "@"}))
        revealed = reveal_around(state, Coordinate(1, 0))

        # Neighbours of (1, 0): (2, 0) slot 2, (0, 0) slot 0, (1, 1) slot 16
        assert revealed.occupant(2).is_revealed  # type: ignore[union-attr]
        assert revealed.occupant(16).is_revealed  # type: ignore[union-attr]
        assert not revealed.occupant(1).is_revealed  # type: ignore[union-attr]
        assert not revealed.occupant(3).is_revealed  # type: ignore[union-attr]

    def test_nothing_to_reveal(self) -> None:
        """When every neighbour is already revealed the same state comes back."""
        state = parse_slots(full_layout({0: "@", 1: "F1+", 15: "W1+"}))
        assert reveal_around(state, Coordinate(0, 0)) is state

    def test_empty_neighbours_ignored(self) -> None:
        """Empty squares next to the coordinate are skipped."""
        state = parse_slots(full_layout({0: "@"}, default="_"))
        assert reveal_around(state, Coordinate(0, 0)) is state
