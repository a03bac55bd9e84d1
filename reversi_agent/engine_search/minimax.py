"""Depth-limited minimax and iterative-deepening alpha-beta.

Both evaluate leaves with solver.heuristics.static_evaluation and share the
SearchStrategy contract with the MCTS coordinator, so they can be swapped
in through EngineConfig.strategy.
"""

from __future__ import annotations

import logging
import math

from reversi_agent.config import ALPHA_BETA_DEPTH, MINIMAX_DEPTH
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color, StrategyKind
from reversi_agent.models.move import Move
from reversi_agent.engine.actions import advance
from reversi_agent.engine.rules import candidate_moves, has_legal_move, is_terminal, legal_moves
from reversi_agent.engine_search.time_manager import TimeManager
from reversi_agent.engine_search.types import (
    EngineConfig, EngineMoveStat, EngineResult, SearchStrategy,
)
from reversi_agent.solver.heuristics import order_moves, static_evaluation

logger = logging.getLogger(__name__)


class _SearchTimeout(Exception):
    pass


def _stats(values: list[tuple[Move, float]], top_k: int) -> list[EngineMoveStat]:
    # Stable sort: ties keep search order, so a fail-low bound never displaces
    # the move that first reached the best value.
    ranked = sorted(values, key=lambda t: -t[1])
    return [EngineMoveStat(move=m, visit_count=0, win_rate=None, score=v) for m, v in ranked[:top_k]]


class MinimaxStrategy(SearchStrategy):
    kind = StrategyKind.MINIMAX

    def __init__(self) -> None:
        self._nodes = 0

    def _value(self, board: Board, depth: int, max_player: Color) -> float:
        self._nodes += 1
        if depth == 0 or is_terminal(board):
            return static_evaluation(board, max_player)
        values = [self._value(advance(board, m), depth - 1, max_player)
                  for m in candidate_moves(board)]
        return max(values) if board.to_move is max_player else min(values)

    def search(self, board: Board, config: EngineConfig) -> EngineResult:
        config.validate()
        clock = TimeManager(config.time_budget_ms)
        if is_terminal(board) or not has_legal_move(board):
            return EngineResult.pass_result(self.kind, clock.elapsed_ms())

        depth = config.minimax_depth or MINIMAX_DEPTH
        self._nodes = 0
        max_player = board.to_move
        values = [(m, self._value(advance(board, m), depth - 1, max_player))
                  for m in legal_moves(board)]
        stats = _stats(values, len(values))
        logger.info("MINIMAX: depth %d, %d nodes, best %s (%s)",
                    depth, self._nodes, stats[0].move, stats[0].score)
        return EngineResult(
            best_move=stats[0].move,
            top_k_moves=stats[:config.top_k],
            nodes=self._nodes,
            elapsed_ms=round(clock.elapsed_ms(), 1),
            strategy=self.kind,
        )


class AlphaBetaStrategy(SearchStrategy):
    """Iterative deepening alpha-beta with static move ordering.

    Depth 1 always completes; deeper iterations are abandoned when the time
    budget runs out and the last completed depth is used.
    """
    kind = StrategyKind.ALPHA_BETA

    def __init__(self) -> None:
        self._nodes = 0
        self._clock: TimeManager | None = None

    def _value(self, board: Board, depth: int, alpha: float, beta: float,
               max_player: Color, deadline_applies: bool) -> float:
        self._nodes += 1
        if deadline_applies and self._clock.expired():
            raise _SearchTimeout()
        if depth == 0 or is_terminal(board):
            return static_evaluation(board, max_player)

        moves = candidate_moves(board)
        if depth >= 2 and len(moves) > 1:
            moves = order_moves(board, moves)

        if board.to_move is max_player:
            value = -math.inf
            for m in moves:
                value = max(value, self._value(advance(board, m), depth - 1, alpha, beta,
                                               max_player, deadline_applies))
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return value

        value = math.inf
        for m in moves:
            value = min(value, self._value(advance(board, m), depth - 1, alpha, beta,
                                           max_player, deadline_applies))
            beta = min(beta, value)
            if alpha >= beta:
                break
        return value

    def _root(self, board: Board, moves: list[Move], depth: int,
              deadline_applies: bool) -> list[tuple[Move, float]]:
        max_player = board.to_move
        alpha = -math.inf
        values = []
        for m in moves:
            v = self._value(advance(board, m), depth - 1, alpha, math.inf,
                            max_player, deadline_applies)
            values.append((m, v))
            alpha = max(alpha, v)
        return values

    def search(self, board: Board, config: EngineConfig) -> EngineResult:
        config.validate()
        self._clock = TimeManager(config.time_budget_ms)
        if is_terminal(board) or not has_legal_move(board):
            return EngineResult.pass_result(self.kind, self._clock.elapsed_ms())

        max_depth = config.minimax_depth or ALPHA_BETA_DEPTH
        self._nodes = 0
        moves = order_moves(board, legal_moves(board))
        best_values: list[tuple[Move, float]] = []
        completed = 0
        for depth in range(1, max_depth + 1):
            try:
                values = self._root(board, moves, depth, deadline_applies=depth > 1)
            except _SearchTimeout:
                logger.debug("ALPHA_BETA: depth %d abandoned at deadline", depth)
                break
            best_values = values
            completed = depth
            # Search the previous best first on the next iteration
            best = max(values, key=lambda t: t[1])[0]
            moves = [best] + [m for m in moves if m != best]
            if self._clock.expired():
                break

        stats = _stats(best_values, len(best_values))
        logger.info("ALPHA_BETA: depth %d, %d nodes, best %s (%s)",
                    completed, self._nodes, stats[0].move, stats[0].score)
        return EngineResult(
            best_move=stats[0].move,
            top_k_moves=stats[:config.top_k],
            iterations=completed,
            nodes=self._nodes,
            elapsed_ms=round(self._clock.elapsed_ms(), 1),
            overshoot_ms=round(self._clock.overshoot_ms(), 1),
            strategy=self.kind,
        )
