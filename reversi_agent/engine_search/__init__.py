"""Search engine components: MCTS, minimax strategies and the session facade."""

from reversi_agent.engine_search.factory import create_strategy, search_best_move
from reversi_agent.engine_search.session import SearchSession
from reversi_agent.engine_search.types import EngineConfig, EngineMoveStat, EngineResult

__all__ = [
    "EngineConfig",
    "EngineMoveStat",
    "EngineResult",
    "SearchSession",
    "create_strategy",
    "search_best_move",
]
