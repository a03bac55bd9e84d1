"""Uniformly random player, used as a sparring partner."""

from __future__ import annotations

import random

from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move, PASS
from reversi_agent.engine.rules import legal_moves
from reversi_agent.agents.base import Player


class RandomAgent(Player):
    def __init__(self, color: Color, seed: int | None = None) -> None:
        super().__init__(color)
        self.rng = random.Random(seed)

    def request_move(self, board: Board) -> Move:
        moves = legal_moves(board)
        if not moves:
            return PASS
        return moves[self.rng.randrange(len(moves))]
