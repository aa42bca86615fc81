"""
Millisecond timer used to sequence timed game phases.

The clock only moves when advance() is called, so tests and front-ends decide
how time passes.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

__all__ = ["ScheduledAction", "Scheduler"]


@dataclass(order=True)
class ScheduledAction:
    at_ms: int
    order: int
    label: str = field(compare=False)
    action: Callable[[], None] = field(compare=False)


class Scheduler:
    def __init__(self) -> None:
        self.queue: list[ScheduledAction] = []
        self._order = 0
        self.now_ms = 0

    def schedule(self, delay_ms: int, label: str, action: Callable[[], None]) -> None:
        """Run action delay_ms after the current time. Ties run in scheduling order."""
        if delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {delay_ms}")
        self._order += 1
        heapq.heappush(self.queue, ScheduledAction(self.now_ms + delay_ms, self._order, label, action))

    @property
    def pending(self) -> int:
        return len(self.queue)

    def next_due_ms(self) -> int | None:
        return self.queue[0].at_ms if self.queue else None

    def advance(self, elapsed_ms: int) -> int:
        """
        Move the clock forward, running every action that falls due.

        Actions scheduled by a running action are also run if they fall due
        within the same window.

        Returns:
            Number of actions run
        """
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must not be negative, got {elapsed_ms}")
        deadline = self.now_ms + elapsed_ms
        ran = 0
        while self.queue and self.queue[0].at_ms <= deadline:
            item = heapq.heappop(self.queue)
            self.now_ms = item.at_ms
            logger.debug("scheduler: t=%dms running %s", self.now_ms, item.label)
            item.action()
            ran += 1
        self.now_ms = deadline
        return ran

    def run_until_idle(self, max_actions: int = 1000) -> int:
        """Run queued actions in time order until none remain. Returns elapsed ms."""
        start = self.now_ms
        for _ in range(max_actions):
            if not self.queue:
                break
            item = heapq.heappop(self.queue)
            self.now_ms = item.at_ms
            logger.debug("scheduler: t=%dms running %s", self.now_ms, item.label)
            item.action()
        else:
            if self.queue:
                raise RuntimeError(f"scheduler still busy after {max_actions} actions")
        return self.now_ms - start
