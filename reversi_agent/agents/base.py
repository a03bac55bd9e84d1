"""Contracts between players, the game loop and the outside world."""

from __future__ import annotations

from abc import ABC, abstractmethod

from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move


class Player(ABC):
    """Something that chooses moves for one colour."""

    def __init__(self, color: Color) -> None:
        self.color = color

    @abstractmethod
    def request_move(self, board: Board) -> Move:
        """Return a move for `board`; board.to_move is this player's colour."""

    def notify_opponent_move(self, move: Move) -> None:
        pass

    def notify_game_end(self, board: Board) -> None:
        pass


class GameInterface(ABC):
    """Transport to a remote opponent (the referee)."""

    @abstractmethod
    def send_move(self, move: Move, color: Color) -> None:
        ...

    @abstractmethod
    def receive_move(self) -> Move:
        ...
