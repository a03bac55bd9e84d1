"""Engine-backed player with a per-game clock."""

from __future__ import annotations

import logging
from dataclasses import replace

from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move, PASS
from reversi_agent.engine.rules import legal_moves
from reversi_agent.engine_search.session import SearchSession
from reversi_agent.engine_search.time_manager import TimeManager, turn_time_budget
from reversi_agent.engine_search.types import EngineConfig
from reversi_agent.agents.base import Player
from reversi_agent.settings import AgentConfig

logger = logging.getLogger(__name__)


class MctsAgent(Player):
    """Plays with a SearchSession, spending a share of the remaining game
    clock on each turn (see config.TIME_ALLOCATIONS).
    """

    def __init__(self, color: Color, config: AgentConfig | None = None) -> None:
        super().__init__(color)
        self.config = (config or AgentConfig()).validate()
        self.session = SearchSession(config=self.config.search)
        self.time_remaining_s = float(self.config.max_time)
        self.search_iterations = 0
        self._last_move: Move | None = None
        if self.config.log:
            logger.info("Agent: %s", self.config)

    def _turn_config(self, board: Board) -> EngineConfig:
        if not self.config.dynamic_time:
            return self.config.search
        budget_s = turn_time_budget(self.time_remaining_s, board.turn)
        return replace(self.config.search, time_budget_ms=budget_s * 1000.0)

    def request_move(self, board: Board) -> Move:
        self.session.start_episode(board, self._last_move)
        self._last_move = None
        moves = legal_moves(board)
        if not moves:
            self.session.apply_external_move(PASS)
            return PASS

        cfg = self._turn_config(board)
        clock = TimeManager(None)
        result = self.session.search(cfg)
        spent_s = clock.elapsed_ms() / 1000.0
        if self.config.dynamic_time:
            allotted_s = (cfg.time_budget_ms or 0.0) / 1000.0
            self.time_remaining_s = max(0.0, self.time_remaining_s - max(allotted_s, spent_s))
        self.search_iterations += result.iterations

        move = result.best_move
        if move not in moves:
            logger.warning("Agent: search returned illegal move %s, sending %s", move, moves[0])
            move = moves[0]
        if self.config.log:
            logger.info("Agent: total search iterations this game: %d", self.search_iterations)
            logger.info("Agent: sending move %s (%.1fs left on the clock)",
                        move, self.time_remaining_s)

        self.session.apply_external_move(move)
        return move

    def notify_opponent_move(self, move: Move) -> None:
        self._last_move = move

    def notify_game_end(self, board: Board) -> None:
        self.session.strategy.reset()
        if self.config.log:
            logger.info("Agent: game over at turn %d after %d search iterations",
                        board.turn, self.search_iterations)
