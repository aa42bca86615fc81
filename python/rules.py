"""
Tunable rules for stage generation, movement and encounters.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from spiral_path import in_bounds, slot_count, slot_of
from spiral_types import Coordinate

__all__ = ["GameRules", "DEFAULT_RULES"]


@dataclass(frozen=True)
class GameRules:
    """
    Rules governing the game loop.

    Attributes:
        player_spawn: Coordinate the player starts each stage on
        boss_slot_range: Inclusive (low, high) ring slots the boss may spawn in
        boss_level_per_stage: Boss level is stage * this
        initial_level_span: Fresh cells get level max(1, floor(random * span))
        turns_per_spawn_level: Spawned level grows by one every this many turns
        spawn_level_headroom: Spawned level never exceeds player level + this
        win_probability: Chance the player wins an encounter
        power_increment: Power gained on each victory
        move_settle_ms: How long the game stays busy after an ordinary move
        loading_ms .. defeat_ms: Dwell time of each encounter phase
    """

    player_spawn: Coordinate = Coordinate(0, 5)
    boss_slot_range: tuple[int, int] = (8, 15)
    boss_level_per_stage: int = 5
    initial_level_span: int = 3
    turns_per_spawn_level: int = 5
    spawn_level_headroom: int = 2
    win_probability: float = 0.75
    power_increment: Fraction = Fraction(1, 10)
    move_settle_ms: int = 500
    loading_ms: int = 400
    face_off_ms: int = 300
    clash_ms: int = 1500
    suspense_ms: int = 2000
    victory_ms: int = 1000
    defeat_ms: int = 2000

    def __post_init__(self) -> None:
        errors: list[str] = []

        if not in_bounds(self.player_spawn):
            errors.append(f"player_spawn {self.player_spawn} is off the grid")

        low, high = self.boss_slot_range
        if not 0 <= low <= high < slot_count():
            errors.append(
                f"boss_slot_range {self.boss_slot_range} must satisfy 0 <= low <= high < {slot_count()}"
            )
        elif in_bounds(self.player_spawn) and not self.boss_slots():
            errors.append(
                f"boss_slot_range {self.boss_slot_range} leaves no slot besides the player's"
            )

        if not 0.0 <= self.win_probability <= 1.0:
            errors.append(f"win_probability {self.win_probability} outside [0, 1]")

        for name in ("boss_level_per_stage", "initial_level_span", "turns_per_spawn_level"):
            if getattr(self, name) < 1:
                errors.append(f"{name} must be at least 1, got {getattr(self, name)}")

        if self.spawn_level_headroom < 0:
            errors.append(f"spawn_level_headroom must not be negative, got {self.spawn_level_headroom}")

        for name in (
            "move_settle_ms", "loading_ms", "face_off_ms",
            "clash_ms", "suspense_ms", "victory_ms", "defeat_ms",
        ):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative, got {getattr(self, name)}")

        if errors:
            error_msg = "Invalid GameRules:\n" + "".join(f"  - {e}\n" for e in errors)
            raise ValueError(error_msg)

    @property
    def player_slot(self) -> int:
        return slot_of(self.player_spawn)

    def boss_slots(self) -> list[int]:
        """Candidate boss slots: the configured range minus the player's slot."""
        low, high = self.boss_slot_range
        return [slot for slot in range(low, high + 1) if slot != self.player_slot]


DEFAULT_RULES = GameRules()
