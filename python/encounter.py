"""
Scripted boss encounter.

The encounter is a fixed cut-scene: each phase dwells for a set time and then
hands over to a single successor, except Suspense, which draws the outcome and
branches to Victory or Defeat. Timing comes from a Scheduler; the resolver
never touches the grid, it only reports the outcome through a callback.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from typing import Callable

from grid_state import Cell
from rules import DEFAULT_RULES, GameRules
from scheduler import Scheduler

logger = logging.getLogger(__name__)

__all__ = [
    "EncounterPhase",
    "ArenaPlacement",
    "Progression",
    "resolve_progression",
    "EncounterResolver",
]


class EncounterPhase(Enum):
    """Phase of the encounter cut-scene."""

    IDLE = "idle"
    LOADING = "loading"  # Grid cleared from view
    FACE_OFF = "face_off"  # Combatants at opposite ends of the arena
    CLASH = "clash"  # Combatants side by side
    SUSPENSE = "suspense"  # Outcome drawn when this ends
    VICTORY = "victory"
    DEFEAT = "defeat"


_SUCCESSORS: dict[EncounterPhase, EncounterPhase] = {
    EncounterPhase.LOADING: EncounterPhase.FACE_OFF,
    EncounterPhase.FACE_OFF: EncounterPhase.CLASH,
    EncounterPhase.CLASH: EncounterPhase.SUSPENSE,
}

_HALF = Fraction(1, 2)

# Arena x positions of (player, boss); both sit between the two arena rows
_ARENA_COLUMNS: dict[EncounterPhase, tuple[int, int]] = {
    EncounterPhase.FACE_OFF: (0, 3),
    EncounterPhase.CLASH: (1, 2),
    EncounterPhase.SUSPENSE: (1, 2),
    EncounterPhase.VICTORY: (1, 2),
    EncounterPhase.DEFEAT: (1, 2),
}


@dataclass(frozen=True)
class ArenaPlacement:
    """A combatant and where it stands in the 4x2 arena."""

    cell: Cell
    x: Fraction
    y: Fraction


@dataclass(frozen=True)
class Progression:
    """Player progression kept across stages."""

    stage: int = 1
    player_level: int = 1
    player_power: Fraction = Fraction(1)


def resolve_progression(
    progression: Progression, won: bool, rules: GameRules = DEFAULT_RULES
) -> Progression:
    """Progression after an encounter: advance on a win, back to stage 1 on a loss."""
    if won:
        return Progression(
            stage=progression.stage + 1,
            player_level=progression.player_level + 1,
            player_power=progression.player_power + rules.power_increment,
        )
    return replace(progression, stage=1, player_level=1)


class EncounterResolver:
    """
    Runs one encounter at a time.

    on_phase is called with each new phase; on_complete is called once with
    the outcome (True for a win) after the Victory or Defeat dwell, once the
    resolver is back in IDLE. The last outcome stays readable in `won`.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        rng: random.Random,
        on_complete: Callable[[bool], None],
        rules: GameRules = DEFAULT_RULES,
        on_phase: Callable[[EncounterPhase], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.rng = rng
        self.rules = rules
        self.on_complete = on_complete
        self.on_phase = on_phase
        self.phase = EncounterPhase.IDLE
        self.player: Cell | None = None
        self.boss: Cell | None = None
        self.won: bool | None = None

    @property
    def active(self) -> bool:
        return self.phase != EncounterPhase.IDLE

    def dwell_ms(self, phase: EncounterPhase) -> int:
        return {
            EncounterPhase.LOADING: self.rules.loading_ms,
            EncounterPhase.FACE_OFF: self.rules.face_off_ms,
            EncounterPhase.CLASH: self.rules.clash_ms,
            EncounterPhase.SUSPENSE: self.rules.suspense_ms,
            EncounterPhase.VICTORY: self.rules.victory_ms,
            EncounterPhase.DEFEAT: self.rules.defeat_ms,
        }[phase]

    def start(self, player: Cell, boss: Cell) -> None:
        """Begin the cut-scene. Raises RuntimeError if one is already running."""
        if self.active:
            raise RuntimeError(f"encounter already running (phase {self.phase.value})")
        self.player = player
        self.boss = replace(boss, is_revealed=True)
        self.won = None
        logger.info("encounter: player '%s' vs boss '%s' level %d", player.id, boss.id, boss.level)
        self._enter(EncounterPhase.LOADING)

    def arena_view(self) -> tuple[ArenaPlacement, ...]:
        """What the arena shows in the current phase (empty while idle or loading)."""
        columns = _ARENA_COLUMNS.get(self.phase)
        if columns is None or self.player is None or self.boss is None:
            return ()
        player_x, boss_x = columns
        return (
            ArenaPlacement(self.player, Fraction(player_x), _HALF),
            ArenaPlacement(self.boss, Fraction(boss_x), _HALF),
        )

    def _enter(self, phase: EncounterPhase) -> None:
        logger.debug("encounter: entering %s", phase.value)
        self.phase = phase
        if self.on_phase is not None:
            self.on_phase(phase)
        self.scheduler.schedule(self.dwell_ms(phase), f"encounter:{phase.value}", self._advance)

    def _advance(self) -> None:
        if self.phase in _SUCCESSORS:
            self._enter(_SUCCESSORS[self.phase])
        elif self.phase == EncounterPhase.SUSPENSE:
            self.won = self.rng.random() < self.rules.win_probability
            logger.info("encounter: %s", "victory" if self.won else "defeat")
            self._enter(EncounterPhase.VICTORY if self.won else EncounterPhase.DEFEAT)
        elif self.phase in (EncounterPhase.VICTORY, EncounterPhase.DEFEAT):
            won = self.phase == EncounterPhase.VICTORY
            self.phase = EncounterPhase.IDLE
            self.player = None
            self.boss = None
            if self.on_phase is not None:
                self.on_phase(EncounterPhase.IDLE)
            self.on_complete(won)
