"""Tests for the millisecond scheduler."""

import pytest

from scheduler import Scheduler


class TestScheduler:
    """Tests for Scheduler."""

    def test_runs_in_time_order(self) -> None:
        """Actions run by due time, not by scheduling order."""
        scheduler = Scheduler()
        ran: list[str] = []
        scheduler.schedule(300, "late", lambda: ran.append("late"))
        scheduler.schedule(100, "early", lambda: ran.append("early"))
        scheduler.advance(1000)
        assert ran == ["early", "late"]

    def test_ties_run_in_scheduling_order(self) -> None:
        """Actions due at the same time keep their scheduling order."""
        scheduler = Scheduler()
        ran: list[int] = []
        for i in range(5):
            scheduler.schedule(50, f"tie{i}", lambda i=i: ran.append(i))
        scheduler.advance(50)
        assert ran == [0, 1, 2, 3, 4]

    def test_not_due_yet(self) -> None:
        """Nothing runs before its due time."""
        scheduler = Scheduler()
        ran: list[str] = []
        scheduler.schedule(500, "settle", lambda: ran.append("settle"))
        assert scheduler.advance(499) == 0
        assert ran == []
        assert scheduler.advance(1) == 1
        assert ran == ["settle"]
        assert scheduler.now_ms == 500

    def test_chained_actions_in_one_window(self) -> None:
        """An action scheduled by a running action runs if it falls due in the window."""
        scheduler = Scheduler()
        ran: list[int] = []

        def first() -> None:
            ran.append(scheduler.now_ms)
            scheduler.schedule(200, "second", lambda: ran.append(scheduler.now_ms))

        scheduler.schedule(100, "first", first)
        scheduler.advance(250)
        assert ran == [100]
        scheduler.advance(50)
        assert ran == [100, 300]

    def test_run_until_idle(self) -> None:
        """run_until_idle drains the queue and reports elapsed time."""
        scheduler = Scheduler()
        scheduler.schedule(400, "a", lambda: scheduler.schedule(300, "b", lambda: None))
        assert scheduler.run_until_idle() == 700
        assert scheduler.pending == 0
        assert scheduler.next_due_ms() is None

    def test_run_until_idle_runaway(self) -> None:
        """A self-rescheduling action is caught instead of looping forever."""
        scheduler = Scheduler()

        def again() -> None:
            scheduler.schedule(1, "again", again)

        scheduler.schedule(1, "again", again)
        with pytest.raises(RuntimeError):
            scheduler.run_until_idle(max_actions=20)

    def test_negative_delays_rejected(self) -> None:
        """Time never runs backwards."""
        scheduler = Scheduler()
        with pytest.raises(ValueError):
            scheduler.schedule(-1, "bad", lambda: None)
        with pytest.raises(ValueError):
            scheduler.advance(-1)
