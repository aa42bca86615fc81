"""
Shared helpers for the voidbreaker tests: layout builders and a scripted RNG.
"""

import random
import re

from grid_state import GridState
from spiral_path import slot_count


class ScriptedRandom(random.Random):
    """
    Random source whose random() returns scripted values first.

    Once the script runs out it falls back to the seeded generator.
    choice() and friends are untouched, so only random() draws are scripted.
    """

    def __init__(self, values: list[float], seed: int = 0) -> None:
        super().__init__(seed)
        self.script = list(values)

    def random(self) -> float:
        if self.script:
            return self.script.pop(0)
        return super().random()

    # Defining getrandbits keeps choice()/randrange() off the scripted random()
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


def full_layout(overrides: dict[int, str], default: str = "F1") -> str:
    """
    Layout string with every slot holding `default` except the overridden ones.

    Example: full_layout({0: "@", 12: "B5"})
    """
    return " ".join(overrides.get(slot, default) for slot in range(slot_count()))


def cycled_layout(overrides: dict[int, str]) -> str:
    """Full layout whose ordinary cells cycle F1 W1 E1 A1 by slot."""
    letters = "FWEA"
    return " ".join(
        overrides.get(slot, f"{letters[slot % 4]}1") for slot in range(slot_count())
    )


def slot_ids(state: GridState) -> dict[str, int]:
    """Map of cell id -> slot, for comparing states before and after a move."""
    return {cell.id: cell.slot for cell in state.cells}


_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return _ANSI.sub("", text)
