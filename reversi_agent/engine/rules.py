"""Legal-move generation and end-of-game detection.

All functions are pure over Board values and safe to call from any thread.
"""

from reversi_agent.config import FULL_MASK
from reversi_agent.models.board import Board
from reversi_agent.models.move import Move, PASS

NOT_A_FILE = 0xFEFEFEFEFEFEFEFE
NOT_H_FILE = 0x7F7F7F7F7F7F7F7F

# (shift, wrap mask). Positive shifts move towards h8, negative towards a1.
DIRECTIONS = (
    (1, NOT_A_FILE),    # east
    (-1, NOT_H_FILE),   # west
    (8, FULL_MASK),     # south
    (-8, FULL_MASK),    # north
    (9, NOT_A_FILE),    # south-east
    (7, NOT_H_FILE),    # south-west
    (-7, NOT_A_FILE),   # north-east
    (-9, NOT_H_FILE),   # north-west
)


def _shift(bits: int, shift: int, wrap: int) -> int:
    if shift > 0:
        return (bits << shift) & wrap & FULL_MASK
    return (bits >> -shift) & wrap


def move_mask(own: int, opponent: int) -> int:
    """Mask of empty squares where `own` would capture at least one disc."""
    empty = ~(own | opponent) & FULL_MASK
    moves = 0
    for shift, wrap in DIRECTIONS:
        run = _shift(own, shift, wrap) & opponent
        while run:
            step = _shift(run, shift, wrap)
            moves |= step & empty
            run = step & opponent
    return moves


def flips_for(own: int, opponent: int, square: int) -> int:
    """Mask of opponent discs captured by placing a disc on `square`."""
    placed = 1 << square
    flips = 0
    for shift, wrap in DIRECTIONS:
        line = 0
        cursor = _shift(placed, shift, wrap)
        while cursor & opponent:
            line |= cursor
            cursor = _shift(cursor, shift, wrap)
        if cursor & own:
            flips |= line
    return flips


def iter_squares(mask: int):
    """Yield set bit indices in ascending order."""
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def legal_move_mask(board: Board) -> int:
    return move_mask(board.own, board.opponent)


def has_legal_move(board: Board) -> bool:
    return legal_move_mask(board) != 0


def opponent_has_legal_move(board: Board) -> bool:
    return move_mask(board.opponent, board.own) != 0


def legal_moves(board: Board) -> list[Move]:
    """All legal placements for the side to move, in ascending square order.

    An empty list means the side to move must pass.
    """
    own, opponent = board.own, board.opponent
    return [
        Move(sq, flips_for(own, opponent, sq))
        for sq in iter_squares(move_mask(own, opponent))
    ]


def is_terminal(board: Board) -> bool:
    """True when the game is over: full board, two passes, or no moves for either side."""
    if board.is_full or board.passes >= 2:
        return True
    return not has_legal_move(board) and not opponent_has_legal_move(board)


def candidate_moves(board: Board) -> list[Move]:
    """Moves available to the side to move, with PASS standing in for a forced pass.

    Empty only when the game is over.
    """
    if is_terminal(board):
        return []
    moves = legal_moves(board)
    return moves if moves else [PASS]


def mobility(board: Board) -> int:
    return bin(legal_move_mask(board)).count("1")


def is_legal(board: Board, move: Move) -> bool:
    if is_terminal(board):
        return False
    if move.is_pass:
        return not has_legal_move(board)
    return bool(legal_move_mask(board) & move.mask)
