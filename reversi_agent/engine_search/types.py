"""Search configuration, result types and the strategy contract."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any

from reversi_agent.config import DEFAULT_EXPLORATION, DEFAULT_TIME_BUDGET_MS, DEFAULT_TOP_K
from reversi_agent.errors import ConfigurationError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import RolloutPolicy, SelectionPolicy, StrategyKind
from reversi_agent.models.move import Move, PASS


def _is_finite_number(value: Any) -> bool:
    return (not isinstance(value, bool) and isinstance(value, (int, float))
            and math.isfinite(value))


@dataclass
class EngineConfig:
    time_budget_ms: float | None = DEFAULT_TIME_BUDGET_MS  # None = no deadline
    max_iterations: int | None = None  # None = until the deadline
    thread_count: int = 1
    exploration_constant: float = DEFAULT_EXPLORATION
    rollout_policy: RolloutPolicy = RolloutPolicy.RANDOM
    strategy: StrategyKind = StrategyKind.MCTS
    selection_policy: SelectionPolicy = SelectionPolicy.ROBUST_CHILD
    minimax_depth: int | None = None  # None = strategy default
    seed: int | None = None
    top_k: int = DEFAULT_TOP_K
    verify_invariants: bool = True

    def validate(self) -> "EngineConfig":
        """Raise ConfigurationError for options no search can run with."""
        if isinstance(self.thread_count, bool) or not isinstance(self.thread_count, int):
            raise ConfigurationError(f"thread_count must be an integer, got {self.thread_count!r}")
        if self.thread_count < 1:
            raise ConfigurationError(f"thread_count must be positive, got {self.thread_count}")
        if not _is_finite_number(self.exploration_constant) or self.exploration_constant <= 0:
            raise ConfigurationError(
                f"exploration_constant must be a positive number, got {self.exploration_constant!r}")
        if self.time_budget_ms is None and self.max_iterations is None:
            raise ConfigurationError("Either time_budget_ms or max_iterations must be set")
        if self.time_budget_ms is not None and not _is_finite_number(self.time_budget_ms):
            raise ConfigurationError(f"time_budget_ms must be a number, got {self.time_budget_ms!r}")
        if self.max_iterations is not None and (
                isinstance(self.max_iterations, bool)
                or not isinstance(self.max_iterations, int) or self.max_iterations < 1):
            raise ConfigurationError(f"max_iterations must be >= 1, got {self.max_iterations!r}")
        if self.minimax_depth is not None and (
                not isinstance(self.minimax_depth, int) or self.minimax_depth < 1):
            raise ConfigurationError(f"minimax_depth must be >= 1, got {self.minimax_depth!r}")
        if not isinstance(self.top_k, int) or self.top_k < 1:
            raise ConfigurationError(f"top_k must be >= 1, got {self.top_k!r}")
        for name, enum_type in (("rollout_policy", RolloutPolicy),
                                ("strategy", StrategyKind),
                                ("selection_policy", SelectionPolicy)):
            if not isinstance(getattr(self, name), enum_type):
                raise ConfigurationError(f"{name} must be a {enum_type.__name__}")
        return self

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build a validated config from plain JSON-style values."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Search options must be an object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown search options: {', '.join(sorted(unknown))}")

        values = dict(data)
        for name, enum_type in (("rollout_policy", RolloutPolicy),
                                ("strategy", StrategyKind),
                                ("selection_policy", SelectionPolicy)):
            raw = values.get(name)
            if isinstance(raw, str):
                try:
                    values[name] = enum_type(raw.lower())
                except ValueError:
                    choices = ", ".join(e.value for e in enum_type)
                    raise ConfigurationError(
                        f"Unknown {name} {raw!r} (expected one of: {choices})") from None
        return cls(**values).validate()


@dataclass(frozen=True)
class EngineMoveStat:
    move: Move
    visit_count: int
    win_rate: float | None  # None when the strategy does not estimate it
    score: float  # value the selection policy ranked by


@dataclass(frozen=True)
class EngineResult:
    """Immutable outcome of one search episode."""
    best_move: Move
    top_k_moves: list[EngineMoveStat] = field(default_factory=list)
    win_rate: float | None = None
    iterations: int = 0
    nodes: int = 0
    elapsed_ms: float = 0.0
    overshoot_ms: float = 0.0
    thread_iterations: tuple[int, ...] = ()
    strategy: StrategyKind = StrategyKind.MCTS

    @property
    def is_pass(self) -> bool:
        return self.best_move.is_pass

    @classmethod
    def pass_result(cls, strategy: StrategyKind, elapsed_ms: float = 0.0) -> "EngineResult":
        return cls(best_move=PASS, strategy=strategy, elapsed_ms=elapsed_ms)


class SearchStrategy(ABC):
    """A move-selection algorithm over Board values."""

    kind: StrategyKind

    @abstractmethod
    def search(self, board: Board, config: EngineConfig) -> EngineResult:
        """Choose a move for board.to_move."""

    def notify_move(self, board: Board, move: Move) -> None:
        """Hook for strategies that keep state between moves (tree reuse)."""

    def reset(self) -> None:
        """Forget any state carried between moves."""
