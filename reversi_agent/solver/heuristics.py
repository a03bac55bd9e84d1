"""Static board evaluation used by move ordering, minimax and final move blending."""

import math
from dataclasses import dataclass

from reversi_agent.config import (
    CORNER_MASK, CORNER_MULTIPLIER, EDGE_MASK, EDGE_MULTIPLIER, INNER_BOARD_MASK,
    MID_GAME_TURN, NUM_SQUARES, ROLLOUT_WEIGHT_EDGE, ROLLOUT_WEIGHT_INNER,
    ROLLOUT_WEIGHT_OTHER, ROLLOUT_WEIGHT_X_SQUARE, WIN_SCORE, X_SQUARE_MASK,
)
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move
from reversi_agent.engine.actions import advance
from reversi_agent.engine.rules import is_terminal, mobility, move_mask
from reversi_agent.engine.scoring import disc_difference, position_features


# --- Blended final-move evaluation ---

@dataclass
class HeuristicWeights:
    """Weights for scoring a root child from search statistics plus position."""
    visits: float = 10.0
    win_ratio: float = 10.0
    corners: float = 2.0
    edges: float = 1.5
    diagonals: float = 1.75
    center_4: float = 1.0
    inner_board: float = 1.0
    opponent_mobility: float = 1.5
    x_squares: float = 1.0


DEFAULT_WEIGHTS = HeuristicWeights()


def blended_value(child: Board, visits: int, win_ratio: float,
                  weights: HeuristicWeights = DEFAULT_WEIGHTS) -> float:
    """Value of moving into `child` for the side that just moved.

    Visit count is squashed through a logistic so it saturates quickly;
    the rest is positional: square-class differences and the mobility left
    to the opponent.
    """
    mover = child.to_move.opponent
    own = position_features(child, mover)
    opp = position_features(child, child.to_move)

    value = weights.visits / (1.0 + math.exp(-min(visits, 50)))
    value += weights.win_ratio * win_ratio
    value += weights.corners * (own.corners - opp.corners)
    value += weights.edges * (own.edges - opp.edges)
    value += weights.diagonals * (own.diagonals - opp.diagonals)
    value += weights.center_4 * (own.center_4 - opp.center_4)
    value += weights.inner_board * (own.inner_board - opp.inner_board)
    value -= weights.opponent_mobility * mobility(child)
    value -= weights.x_squares * (own.x_squares - opp.x_squares)
    return value


# --- Minimax evaluation ---

def static_evaluation(board: Board, max_player: Color) -> int:
    """Score `board` from `max_player`'s point of view.

    Finished games score +/-WIN_SCORE plus the disc margin. Before the mid
    game the score is mobility and corner/edge control; afterwards the raw
    disc difference.
    """
    if is_terminal(board):
        diff = disc_difference(board, max_player)
        if diff > 0:
            return WIN_SCORE + diff
        if diff < 0:
            return -WIN_SCORE + diff
        return 0

    if board.turn < MID_GAME_TURN:
        own = board.discs(max_player)
        opp = board.discs(max_player.opponent)
        own_moves = bin(move_mask(own, opp)).count("1")
        opp_moves = bin(move_mask(opp, own)).count("1")
        corners = bin(own & CORNER_MASK).count("1") - bin(opp & CORNER_MASK).count("1")
        edges = bin(own & EDGE_MASK).count("1") - bin(opp & EDGE_MASK).count("1")
        return (own_moves - opp_moves) + CORNER_MULTIPLIER * corners + EDGE_MULTIPLIER * edges

    return disc_difference(board, max_player)


def order_moves(board: Board, moves: list[Move]) -> list[Move]:
    """Moves sorted best-first for the side to move (stable on ties)."""
    mover = board.to_move
    scored = [(static_evaluation(advance(board, m), mover), i, m) for i, m in enumerate(moves)]
    scored.sort(key=lambda t: (-t[0], t[1]))
    return [m for _, _, m in scored]


# --- Rollout move weights ---

def _square_weight(square: int) -> float:
    bit = 1 << square
    if bit & X_SQUARE_MASK:
        return ROLLOUT_WEIGHT_X_SQUARE
    if bit & EDGE_MASK:
        return ROLLOUT_WEIGHT_EDGE
    if bit & INNER_BOARD_MASK:
        return ROLLOUT_WEIGHT_INNER
    return ROLLOUT_WEIGHT_OTHER


ROLLOUT_SQUARE_WEIGHTS = tuple(_square_weight(sq) for sq in range(NUM_SQUARES))


def is_corner(move: Move) -> bool:
    return bool(move.mask & CORNER_MASK)
