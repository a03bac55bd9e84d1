"""Apply moves to boards: disc placement, flip resolution and passes."""

from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move
from reversi_agent.engine.rules import flips_for, is_terminal, move_mask
from reversi_agent.errors import GameOverError, InvalidMoveError


def _place(board: Board, square: int, flips: int) -> Board:
    placed = (1 << square) | flips
    if board.to_move is Color.BLACK:
        black, white = board.black | placed, board.white & ~flips
    else:
        black, white = board.black & ~flips, board.white | placed
    return Board(
        black=black,
        white=white,
        to_move=board.to_move.opponent,
        turn=board.turn + 1,
        passes=0,
    )


def _pass(board: Board) -> Board:
    return Board(
        black=board.black,
        white=board.white,
        to_move=board.to_move.opponent,
        turn=board.turn + 1,
        passes=board.passes + 1,
    )


def apply_move(board: Board, move: Move) -> Board:
    """Play `move` for the side to move and return the resulting board.

    Raises GameOverError on a finished game and InvalidMoveError when the
    move is not legal. PASS is legal only when the side to move has no
    placement available. Flips are always recomputed from the board.
    """
    if is_terminal(board):
        raise GameOverError(f"Game is over; cannot play {move}")

    own, opponent = board.own, board.opponent
    available = move_mask(own, opponent)
    if move.is_pass:
        if available:
            raise InvalidMoveError(f"{board.to_move.name} has legal moves and cannot pass")
        return _pass(board)

    if not available & move.mask:
        raise InvalidMoveError(f"{move} is not a legal move for {board.to_move.name}")
    return _place(board, move.square, flips_for(own, opponent, move.square))


def advance(board: Board, move: Move) -> Board:
    """Apply a move taken from legal_moves/candidate_moves of this same board.

    Skips validation and trusts move.flips; used on the search hot path.
    """
    if move.is_pass:
        return _pass(board)
    return _place(board, move.square, move.flips)
