"""Time-budget utilities for search."""

from __future__ import annotations

import threading
import time

from reversi_agent.config import TIME_ALLOCATIONS


class TimeManager:
    """Wall-clock deadline. A budget of None never expires; <= 0 is already expired."""

    def __init__(self, budget_ms: float | None):
        self.started = time.perf_counter()
        self.budget_ms = budget_ms
        if budget_ms is None:
            self.deadline = None
        else:
            self.deadline = self.started + max(0.0, budget_ms) / 1000.0

    def time_left_ms(self) -> float:
        if self.deadline is None:
            return float("inf")
        return max(0.0, (self.deadline - time.perf_counter()) * 1000.0)

    def expired(self) -> bool:
        return self.deadline is not None and time.perf_counter() >= self.deadline

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000.0

    def overshoot_ms(self) -> float:
        """How far past the deadline we are (0 when within budget)."""
        if self.deadline is None:
            return 0.0
        return max(0.0, (time.perf_counter() - self.deadline) * 1000.0)


class SearchBudget:
    """Shared stop condition for the workers of one search episode.

    Workers call try_start() between iterations. The first call always
    succeeds so an episode makes progress even with a zero time budget.
    """

    def __init__(self, time_budget_ms: float | None, max_iterations: int | None):
        self.clock = TimeManager(time_budget_ms)
        self.max_iterations = max_iterations
        self._started = 0
        self._lock = threading.Lock()

    @property
    def started(self) -> int:
        with self._lock:
            return self._started

    def try_start(self) -> bool:
        with self._lock:
            if self._started > 0:
                if self.max_iterations is not None and self._started >= self.max_iterations:
                    return False
                if self.clock.expired():
                    return False
            self._started += 1
            return True


def turn_time_budget(time_remaining_s: float, turn: int) -> float:
    """Seconds to spend on `turn` given what is left on the game clock."""
    idx = min(max(0, turn), len(TIME_ALLOCATIONS) - 1)
    return max(0.0, time_remaining_s) * TIME_ALLOCATIONS[idx]
