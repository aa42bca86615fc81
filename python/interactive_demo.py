"""
Interactive terminal demo for voidbreaker.
Display the grid and move the player with keyboard commands.
"""

import logging
import sys
import time

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_snapshot
from grid_parser import format_slots
from move_engine import EncounterTriggered, Moved, NoOp
from rules import DEFAULT_RULES, GameRules
from spiral_types import Direction
from voidbreaker import VoidbreakerGame, new_rng


# Wall-clock step used while timers are running
FRAME_MS = 50

KEY_DIRECTIONS = {
    "w": Direction.N,
    "s": Direction.S,
    "a": Direction.W,
    "d": Direction.E,
}


class InteractiveDemo:
    """Interactive demo driving a VoidbreakerGame from the keyboard."""

    def __init__(self, game: VoidbreakerGame) -> None:
        self.game = game
        self.console = Console()
        self.status_message = "Ready"
        self.engaged = False

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        snapshot = self.game.snapshot()

        status = Text()
        status.append(Text.from_ansi(render_snapshot(snapshot)))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W - Move Up\n")
        status.append("  A - Move Left\n")
        status.append("  S - Move Down\n")
        status.append("  D - Move Right\n")
        status.append("  R - Restart from stage 1\n")
        status.append("  Q - Quit\n\n")

        # Status line at the bottom
        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Voidbreaker", border_style="green", width=60)

    def attempt_move(self, direction: Direction) -> None:
        """Send a move intent and describe what happened."""
        outcome = self.game.move(direction)

        if isinstance(outcome, NoOp):
            self.status_message = f"✗ Move {direction.value} ignored: {outcome.reason.value}"
        elif isinstance(outcome, EncounterTriggered):
            self.engaged = True
            self.status_message = f"! Boss level {outcome.boss.level} engaged"
        elif isinstance(outcome, Moved):
            self.status_message = (
                f"✓ Consumed {outcome.consumed.kind.name.lower()} level {outcome.consumed.level}, "
                f"{len(outcome.shifted)} cells shifted"
            )

    def wait_until_idle(self, live: Live) -> None:
        """Let timers run in real time, refreshing the display, until input is accepted again."""
        while self.game.busy:
            time.sleep(FRAME_MS / 1000)
            self.game.advance(FRAME_MS)
            live.update(self.generate_display())

        if self.engaged:
            self.engaged = False
            result = "won" if self.game.encounter.won else "lost"
            self.status_message = f"Encounter {result}; now at stage {self.game.stage}"

    def run(self) -> None:
        """Run the interactive demo with WASD controls."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=20) as live:
            try:
                while True:
                    # Update display
                    live.update(self.generate_display())

                    # Get single key press
                    key = readchar.readkey()

                    # Handle key press
                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() == 'r':
                        self.game.restart()
                        self.status_message = "Restarted from stage 1"
                    elif key.lower() in KEY_DIRECTIONS:
                        self.attempt_move(KEY_DIRECTIONS[key.lower()])
                        self.wait_until_idle(live)
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(seed: int | None, rules: GameRules = DEFAULT_RULES) -> None:
    """Run interactive demo with a fresh game."""
    demo = InteractiveDemo(VoidbreakerGame(rules, rng=new_rng(seed)))
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == 'sublime':
        # Running from IDE - just render the initial state
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s: %(message)s')

        print('Running from IDE - rendering initial state')
        print()

        game = VoidbreakerGame(rng=new_rng(int(sys.argv[2]) if len(sys.argv) > 2 else None))
        print(render_snapshot(game.snapshot()))
        print()
        print(format_slots(game.state))
    else:
        main(int(sys.argv[1]) if len(sys.argv) > 1 else None)
