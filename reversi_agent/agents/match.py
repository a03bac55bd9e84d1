"""Game loops: against the referee, and local matches between two players."""

from __future__ import annotations

import logging
import time

from reversi_agent.errors import InvalidMoveError, ProtocolError
from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import PASS
from reversi_agent.engine.actions import apply_move
from reversi_agent.engine.rules import is_terminal, legal_moves
from reversi_agent.engine.scoring import score, winner
from reversi_agent.agents.base import GameInterface, Player

logger = logging.getLogger(__name__)


def play_match(player: Player, interface: GameInterface, board: Board | None = None) -> Board:
    """Play one game between `player` and the remote side behind `interface`.

    Returns the final board. An illegal move from the remote side raises
    ProtocolError.
    """
    board = board or Board.initial()
    while True:
        logger.info("Main: start turn %d", board.turn)
        if is_terminal(board):
            logger.info("Main: game over at turn %d, score %s", board.turn, score(board))
            player.notify_game_end(board)
            return board

        if board.to_move is player.color:
            moves = legal_moves(board)
            move = player.request_move(board)
            if moves and move not in moves:
                logger.warning("Main: got illegal move %s from player, sending %s", move, moves[0])
                move = moves[0]
            elif not moves:
                move = PASS
            interface.send_move(move, player.color)
            board = apply_move(board, move)
        else:
            move = interface.receive_move()
            logger.info("Main: got opponent move %s", move)
            try:
                board = apply_move(board, move)
            except InvalidMoveError as e:
                raise ProtocolError(f"Opponent played an illegal move: {e}") from e
            player.notify_opponent_move(move)


def play_local(black: Player, white: Player, board: Board | None = None) -> Board:
    """Play a complete game between two local players and return the final board."""
    if black.color is not Color.BLACK or white.color is not Color.WHITE:
        raise ValueError("play_local expects a black and a white player")
    players = {Color.BLACK: black, Color.WHITE: white}
    board = board or Board.initial()
    started = time.perf_counter()

    while not is_terminal(board):
        mover = players[board.to_move]
        move = mover.request_move(board)
        logger.debug("Turn %d: %s plays %s", board.turn, board.to_move.name, move)
        board = apply_move(board, move)
        players[mover.color.opponent].notify_opponent_move(move)

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    black_count, white_count = score(board)
    result = winner(board)
    logger.info("Game over after %d turns in %.0fms: %d-%d, %s",
                board.turn, elapsed_ms, black_count, white_count,
                result.name if result else "draw")
    for p in players.values():
        p.notify_game_end(board)
    return board
