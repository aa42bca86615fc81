"""
Game session: ties stage generation, movement and encounters together.

The session owns the grid, the busy flag, the mode and the player's
progression. Front-ends send move() intents, let time pass with advance(),
and read snapshot() for display.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from fractions import Fraction

from encounter import ArenaPlacement, EncounterPhase, EncounterResolver, Progression, resolve_progression
from grid_init import init_stage
from grid_state import Cell, GridState
from move_engine import EncounterTriggered, Moved, MoveOutcome, NoOp, NoOpReason, attempt_move
from rules import DEFAULT_RULES, GameRules
from scheduler import Scheduler
from spiral_types import Direction, GameMode

logger = logging.getLogger(__name__)

__all__ = ["GameSnapshot", "VoidbreakerGame", "new_rng"]


def new_rng(seed: int | None = None) -> random.Random:
    rng = random.Random()
    rng.seed(seed)
    return rng


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a front-end needs to draw one frame."""

    cells: tuple[Cell, ...]
    arena: tuple[ArenaPlacement, ...]
    mode: GameMode
    phase: EncounterPhase
    stage: int
    player_level: int
    player_power: Fraction
    turn: int
    busy: bool


class VoidbreakerGame:
    """A single-player session over the spiral grid."""

    def __init__(
        self,
        rules: GameRules = DEFAULT_RULES,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.rules = rules
        self.rng = rng if rng is not None else new_rng()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.progression = Progression()
        self.turn = 0
        self.busy = False
        self._settle_generation = 0
        self.mode = GameMode.EXPLORE
        self.encounter = EncounterResolver(
            self.scheduler, self.rng, on_complete=self._finish_encounter, rules=rules
        )
        self.state: GridState = self._start_stage()

    # Progression shortcuts used by front-ends

    @property
    def stage(self) -> int:
        return self.progression.stage

    @property
    def player_level(self) -> int:
        return self.progression.player_level

    @property
    def player_power(self) -> Fraction:
        return self.progression.player_power

    def _start_stage(self) -> GridState:
        state = init_stage(self.progression.stage, self.progression.player_level, self.rng, self.rules)
        self.mode = GameMode.EXPLORE
        return state

    def move(self, direction: Direction) -> MoveOutcome:
        """
        Handle a move intent.

        Intents arriving while busy or in the arena are dropped, not queued.
        """
        if self.busy:
            return NoOp(NoOpReason.BUSY)
        if self.mode != GameMode.EXPLORE:
            return NoOp(NoOpReason.NOT_EXPLORING)

        outcome = attempt_move(
            self.state, direction, self.turn, self.progression.player_level, self.rng, self.rules
        )

        if isinstance(outcome, Moved):
            self.state = outcome.state
            self.turn += 1
            self.busy = True
            self._settle_generation += 1
            generation = self._settle_generation
            self.scheduler.schedule(
                self.rules.move_settle_ms, "move:settle", lambda: self._settle(generation)
            )
        elif isinstance(outcome, EncounterTriggered):
            self.busy = True
            self.mode = GameMode.ARENA
            self.encounter.start(outcome.player, outcome.boss)

        return outcome

    def _settle(self, generation: int) -> None:
        # Timers from before a restart or an earlier move are stale
        if generation == self._settle_generation:
            self.busy = False

    def _finish_encounter(self, won: bool) -> None:
        self.progression = resolve_progression(self.progression, won, self.rules)
        logger.info(
            "stage %d, player level %d, power %s",
            self.progression.stage,
            self.progression.player_level,
            self.progression.player_power,
        )
        self.state = self._start_stage()
        self.busy = False

    def restart(self) -> None:
        """Start over from stage 1. Ignored while an encounter is running."""
        if self.encounter.active:
            return
        self.progression = Progression()
        self.turn = 0
        self.busy = False
        self._settle_generation += 1
        self.state = self._start_stage()

    def advance(self, elapsed_ms: int) -> None:
        self.scheduler.advance(elapsed_ms)

    def run_until_idle(self) -> int:
        """Let all pending timers fire. Returns the simulated milliseconds elapsed."""
        return self.scheduler.run_until_idle()

    def snapshot(self) -> GameSnapshot:
        if self.mode == GameMode.EXPLORE:
            cells = self.state.cells
        else:
            cells = tuple(placement.cell for placement in self.encounter.arena_view())
        return GameSnapshot(
            cells=cells,
            arena=self.encounter.arena_view(),
            mode=self.mode,
            phase=self.encounter.phase,
            stage=self.progression.stage,
            player_level=self.progression.player_level,
            player_power=self.progression.player_power,
            turn=self.turn,
            busy=self.busy,
        )
