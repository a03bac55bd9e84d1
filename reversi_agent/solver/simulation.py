"""Rollout policies: play a position out to the end of the game.

Rollouts work on their own Board values; nothing here is shared between
threads except the immutable weight table.
"""

import random
from dataclasses import dataclass

from reversi_agent.config import MAX_ROLLOUT_PLIES
from reversi_agent.errors import SearchInvariantError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color, RolloutPolicy
from reversi_agent.models.move import Move, PASS
from reversi_agent.engine.actions import advance
from reversi_agent.engine.rules import is_terminal, legal_moves
from reversi_agent.engine.scoring import score, winner
from reversi_agent.solver.heuristics import ROLLOUT_SQUARE_WEIGHTS, is_corner


@dataclass(frozen=True)
class RolloutOutcome:
    """Final result of one playout."""
    winner: Color | None
    black: int
    white: int
    plies: int

    def reward_for(self, color: Color) -> float:
        """1.0 for a win, 0.5 for a draw, 0.0 for a loss."""
        if self.winner is None:
            return 0.5
        return 1.0 if self.winner is color else 0.0


def random_move(moves: list[Move], rng: random.Random) -> Move:
    return moves[rng.randrange(len(moves))]


def heuristic_move(moves: list[Move], rng: random.Random) -> Move:
    """Take a corner when one is available, else a weighted random pick.

    Edges are favoured and squares next to a corner are avoided.
    """
    corners = [m for m in moves if is_corner(m)]
    if corners:
        return corners[rng.randrange(len(corners))]
    weights = [ROLLOUT_SQUARE_WEIGHTS[m.square] for m in moves]
    return rng.choices(moves, weights=weights, k=1)[0]


_POLICIES = {
    RolloutPolicy.RANDOM: random_move,
    RolloutPolicy.HEURISTIC: heuristic_move,
}


def rollout(board: Board, rng: random.Random,
            policy: RolloutPolicy = RolloutPolicy.RANDOM) -> RolloutOutcome:
    """Play `board` to the end using `policy` and report the outcome."""
    choose = _POLICIES[policy]
    plies = 0
    while not is_terminal(board):
        if plies >= MAX_ROLLOUT_PLIES:
            raise SearchInvariantError(
                f"Rollout exceeded {MAX_ROLLOUT_PLIES} plies at turn {board.turn}")
        moves = legal_moves(board)
        board = advance(board, choose(moves, rng) if moves else PASS)
        plies += 1

    black, white = score(board)
    return RolloutOutcome(winner=winner(board), black=black, white=white, plies=plies)
