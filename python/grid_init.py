"""
Stage generation: a fresh, fully occupied grid for a stage.
"""

from __future__ import annotations

import logging
import random

from grid_state import Cell, GridState
from rules import DEFAULT_RULES, GameRules
from spiral_path import slot_count
from spiral_types import CellKind, DECOR_TAGS, ELEMENTAL_KINDS

logger = logging.getLogger(__name__)

__all__ = ["init_stage"]


def init_stage(
    stage: int,
    player_level: int,
    rng: random.Random,
    rules: GameRules = DEFAULT_RULES,
) -> GridState:
    """
    Build the grid for a stage.

    Every ring slot is filled: the player on the spawn coordinate, one boss on
    a random slot from the boss range, and random elemental cells elsewhere.
    The player and boss start revealed; ordinary cells start hidden.

    Args:
        stage: Stage number (>= 1); the boss level is stage * boss_level_per_stage
        player_level: Current player level, shown on the player cell
        rng: Source of every random draw
        rules: Spawn coordinate, boss range and level rules

    Returns:
        A GridState satisfying every grid invariant
    """
    if stage < 1:
        raise ValueError(f"stage must be at least 1, got {stage}")
    if player_level < 1:
        raise ValueError(f"player_level must be at least 1, got {player_level}")

    player_slot = rules.player_slot
    boss_slot = rng.choice(rules.boss_slots())
    serial = 0

    def next_id(slot: int) -> str:
        nonlocal serial
        serial += 1
        return f"s{stage}-c{serial}-{slot}"

    cells: list[Cell] = []
    for slot in range(slot_count()):
        if slot == player_slot:
            cells.append(Cell(
                id=next_id(slot),
                kind=rng.choice(ELEMENTAL_KINDS),
                level=player_level,
                slot=slot,
                is_player=True,
                is_revealed=True,
            ))
        elif slot == boss_slot:
            cells.append(Cell(
                id=next_id(slot),
                kind=CellKind.BOSS,
                level=stage * rules.boss_level_per_stage,
                slot=slot,
                is_boss=True,
                is_revealed=True,
            ))
        else:
            cells.append(Cell(
                id=next_id(slot),
                kind=rng.choice(ELEMENTAL_KINDS),
                level=max(1, int(rng.random() * rules.initial_level_span)),
                slot=slot,
                decoration=rng.choice(DECOR_TAGS),
            ))

    logger.info(
        "init_stage: stage=%d player_level=%d player_slot=%d boss_slot=%d",
        stage,
        player_level,
        player_slot,
        boss_slot,
    )
    return GridState.from_cells(stage, cells, next_serial=serial)
