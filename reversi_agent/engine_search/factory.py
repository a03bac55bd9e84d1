"""Strategy construction and one-shot search."""

from __future__ import annotations

from reversi_agent.models.board import Board
from reversi_agent.models.enums import StrategyKind
from reversi_agent.engine_search.mcts import MctsCoordinator
from reversi_agent.engine_search.minimax import AlphaBetaStrategy, MinimaxStrategy
from reversi_agent.engine_search.types import EngineConfig, EngineResult, SearchStrategy

_STRATEGIES: dict[StrategyKind, type[SearchStrategy]] = {
    StrategyKind.MCTS: MctsCoordinator,
    StrategyKind.MINIMAX: MinimaxStrategy,
    StrategyKind.ALPHA_BETA: AlphaBetaStrategy,
}


def create_strategy(kind: StrategyKind) -> SearchStrategy:
    return _STRATEGIES[kind]()


def search_best_move(board: Board, cfg: EngineConfig | None = None) -> EngineResult:
    """Run a single search episode on `board` with a fresh strategy."""
    cfg = (cfg or EngineConfig()).validate()
    return create_strategy(cfg.strategy).search(board, cfg)
