"""Disc counting, game result and positional features."""

from dataclasses import dataclass

from reversi_agent.config import (
    CENTER_4_MASK, CORNER_MASK, DIAGONAL_MASK, EDGE_MASK, INNER_BOARD_MASK,
    X_SQUARE_MASK,
)
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color


def _popcount(bits: int) -> int:
    return bin(bits).count("1")


def score(board: Board) -> tuple[int, int]:
    """(black_count, white_count)."""
    return _popcount(board.black), _popcount(board.white)


def disc_difference(board: Board, color: Color) -> int:
    black, white = score(board)
    return black - white if color is Color.BLACK else white - black


def winner(board: Board) -> Color | None:
    """The side with more discs, or None for a draw."""
    black, white = score(board)
    if black > white:
        return Color.BLACK
    if white > black:
        return Color.WHITE
    return None


@dataclass
class PositionFeatures:
    """Disc counts for one side over the board's square classes."""
    discs: int = 0
    corners: int = 0
    edges: int = 0
    x_squares: int = 0
    diagonals: int = 0
    center_4: int = 0
    inner_board: int = 0


def position_features(board: Board, color: Color) -> PositionFeatures:
    discs = board.discs(color)
    return PositionFeatures(
        discs=_popcount(discs),
        corners=_popcount(discs & CORNER_MASK),
        edges=_popcount(discs & EDGE_MASK),
        x_squares=_popcount(discs & X_SQUARE_MASK),
        diagonals=_popcount(discs & DIAGONAL_MASK),
        center_4=_popcount(discs & CENTER_4_MASK),
        inner_board=_popcount(discs & INNER_BOARD_MASK),
    )
