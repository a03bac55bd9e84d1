"""The engine facade used by agents and adapters.

A SearchSession owns the authoritative board for one game and the search
strategy (and therefore the search tree) that plays it. Moves reach it
either from outside (apply_external_move) or from the referee loop via
start_episode; search() never mutates the authoritative board.
"""

from __future__ import annotations

import logging

from reversi_agent.errors import InvalidMoveError
from reversi_agent.models.board import Board
from reversi_agent.models.move import Move
from reversi_agent.engine.actions import apply_move
from reversi_agent.engine_search.factory import create_strategy
from reversi_agent.engine_search.types import EngineConfig, EngineResult, SearchStrategy

logger = logging.getLogger(__name__)


class SearchSession:
    def __init__(self, board: Board | None = None,
                 config: EngineConfig | None = None) -> None:
        self.config = (config or EngineConfig()).validate()
        self.board = board or Board.initial()
        self.strategy: SearchStrategy = create_strategy(self.config.strategy)
        self.last_result: EngineResult | None = None

    def start_episode(self, current_board: Board, opponent_last_move: Move | None = None) -> None:
        """Sync to the authoritative position before searching.

        When `opponent_last_move` leads from the current board to
        `current_board` the move is replayed so the strategy can keep its
        subtree; otherwise the strategy is reset.
        """
        if opponent_last_move is not None and current_board.position_key != self.board.position_key:
            try:
                replayed = apply_move(self.board, opponent_last_move)
            except InvalidMoveError:
                replayed = None
            if replayed is not None and replayed.position_key == current_board.position_key:
                self.strategy.notify_move(self.board, opponent_last_move)
                self.board = current_board
                return
        if current_board.position_key != self.board.position_key:
            logger.debug("Session: resynchronising to a new position at turn %d", current_board.turn)
            self.strategy.reset()
        self.board = current_board

    def search(self, config: EngineConfig | None = None) -> EngineResult:
        cfg = (config or self.config).validate()
        if cfg.strategy is not self.strategy.kind:
            self.strategy = create_strategy(cfg.strategy)
        self.last_result = self.strategy.search(self.board, cfg)
        return self.last_result

    def apply_external_move(self, move: Move) -> Board:
        """Commit a move to the authoritative board (raises InvalidMoveError)."""
        new_board = apply_move(self.board, move)
        self.strategy.notify_move(self.board, move)
        self.board = new_board
        return new_board
