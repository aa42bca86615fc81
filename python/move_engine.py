"""
Player movement over the spiral grid.

A move onto an ordinary cell consumes it and compacts the ring: starting from
the slot the player vacated, every later occupied slot (except the player's
new one) slides down into the current hole, and a fresh cell is spawned in
the last hole left behind. A move onto the boss starts an encounter instead.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum

from grid_parser import format_slots
from grid_state import Cell, GridState, reveal_around
from rules import DEFAULT_RULES, GameRules
from spiral_path import in_bounds, slot_count
from spiral_types import CellKind, Coordinate, DECOR_TAGS, Direction, ELEMENTAL_KINDS

logger = logging.getLogger(__name__)

__all__ = [
    "NoOpReason",
    "NoOp",
    "Moved",
    "EncounterTriggered",
    "MoveOutcome",
    "attempt_move",
    "consume_and_reindex",
    "next_kind",
    "spawn_level",
]


class NoOpReason(Enum):
    """Why a move request left the game untouched."""

    OFF_GRID = "off_grid"  # Target square is outside the grid
    NO_OCCUPANT = "no_occupant"  # Target square is an empty slot
    NO_PLAYER = "no_player"  # Grid has no player cell
    BUSY = "busy"  # Previous move or encounter still settling
    NOT_EXPLORING = "not_exploring"  # Game is in the arena


@dataclass(frozen=True)
class NoOp:
    """Move ignored; nothing changed."""

    reason: NoOpReason
    target: Coordinate | None = None


@dataclass(frozen=True)
class Moved:
    """
    Ordinary move applied.

    Attributes:
        state: Grid after consumption, shift and spawn
        consumed: The cell the player moved onto (now gone)
        spawned: The fresh cell placed in the final hole
        shifted: (cell id, from slot, to slot) for each relocated cell, in scan order
    """

    state: GridState
    consumed: Cell
    spawned: Cell
    shifted: tuple[tuple[str, int, int], ...] = ()


@dataclass(frozen=True)
class EncounterTriggered:
    """Player bumped into the boss; the grid is unchanged."""

    player: Cell
    boss: Cell


MoveOutcome = NoOp | Moved | EncounterTriggered


def next_kind(kind: CellKind) -> CellKind:
    """Cyclic successor among the four elements (FIRE -> WATER -> EARTH -> AIR -> FIRE)."""
    if kind not in ELEMENTAL_KINDS:
        raise ValueError(f"{kind} has no elemental successor")
    return ELEMENTAL_KINDS[(kind.value + 1) % len(ELEMENTAL_KINDS)]


def spawn_level(turn: int, player_level: int, rules: GameRules = DEFAULT_RULES) -> int:
    """Level of a cell spawned on the given turn, clamped to [1, player_level + headroom]."""
    level = max(1, turn // rules.turns_per_spawn_level)
    return min(level, player_level + rules.spawn_level_headroom)


def attempt_move(
    state: GridState,
    direction: Direction,
    turn: int,
    player_level: int,
    rng: random.Random,
    rules: GameRules = DEFAULT_RULES,
) -> MoveOutcome:
    """
    Try to move the player one square in a direction.

    Busy and mode gating belong to the caller; this only looks at the grid.

    Args:
        state: Current grid
        direction: Direction to move
        turn: Turn counter before this move (drives the spawned level)
        player_level: Current player level (caps the spawned level)
        rng: Source of the spawned cell's decoration
        rules: Movement rules

    Returns:
        NoOp if the target is off-grid or empty, EncounterTriggered if the
        target is the boss, otherwise Moved with the new grid
    """
    player = state.player
    if player is None:
        return NoOp(NoOpReason.NO_PLAYER)

    target = player.coordinate.step(direction)
    if not in_bounds(target):
        logger.debug("attempt_move %s: %s is off the grid", direction.value, target)
        return NoOp(NoOpReason.OFF_GRID, target)

    target_cell = state.occupant_at(target)
    if target_cell is None:
        logger.debug("attempt_move %s: %s is empty", direction.value, target)
        return NoOp(NoOpReason.NO_OCCUPANT, target)

    if target_cell.is_boss:
        logger.info("attempt_move %s: boss '%s' at %s", direction.value, target_cell.id, target)
        return EncounterTriggered(player, target_cell)

    return consume_and_reindex(state, target_cell, turn, player_level, rng, rules)


def consume_and_reindex(
    state: GridState,
    target_cell: Cell,
    turn: int,
    player_level: int,
    rng: random.Random,
    rules: GameRules = DEFAULT_RULES,
) -> Moved:
    """
    Move the player onto target_cell, consume it, close the gap and spawn.

    The scan always runs forward from the player's old slot to the end of the
    ring with no wraparound, skipping the player's new slot. When the target
    lies below the old slot the skip never fires and the tail of the ring
    slides down into the player's old slot.
    """
    player = state.player
    if player is None:
        raise ValueError("consume_and_reindex needs a grid with a player")
    if target_cell.is_player or target_cell.is_boss:
        raise ValueError(f"cell '{target_cell.id}' cannot be consumed")

    old_slot = player.slot
    new_slot = target_cell.slot

    # Convert to mutable structure
    slots = list(state.slots)
    slots[old_slot] = None
    slots[new_slot] = replace(player, slot=new_slot)

    hole = old_slot
    shifted: list[tuple[str, int, int]] = []
    for candidate in range(old_slot + 1, slot_count()):
        if candidate == new_slot:
            continue
        cell = slots[candidate]
        if cell is None:
            continue
        slots[hole] = replace(cell, slot=hole)
        slots[candidate] = None
        shifted.append((cell.id, candidate, hole))
        hole = candidate

    # Reveal before spawning so the fresh cell always starts hidden
    shifted_state = reveal_around(
        GridState(state.stage, tuple(slots), state.next_serial), target_cell.coordinate
    )

    serial = state.next_serial + 1
    spawned = Cell(
        id=f"s{state.stage}-c{serial}",
        kind=next_kind(target_cell.kind),
        level=spawn_level(turn, player_level, rules),
        slot=hole,
        decoration=rng.choice(DECOR_TAGS),
    )
    slots = list(shifted_state.slots)
    slots[hole] = spawned
    moved_state = GridState(state.stage, tuple(slots), serial)

    logger.debug(
        "consume_and_reindex: player %d -> %d, consumed '%s', %d shifted, spawned '%s' at %d",
        old_slot,
        new_slot,
        target_cell.id,
        len(shifted),
        spawned.id,
        hole,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("layout: %s", format_slots(moved_state))

    return Moved(moved_state, target_cell, spawned, tuple(shifted))
