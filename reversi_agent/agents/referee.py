"""Line protocol spoken with the tournament referee over stdin/stdout.

    I B | I W     referee assigns our colour
    R B | R W     we reply that we are ready
    B d 3         black plays d3 (colour, column letter, 1-based row)
    W             white passes
    C <text>      comment, ignored by the referee

Anything we print that is not a move or a ready line must be a comment.
"""

from __future__ import annotations

import logging
from typing import TextIO

from reversi_agent.config import COLUMN_LETTERS
from reversi_agent.errors import InvalidMoveError, ProtocolError
from reversi_agent.models.enums import Color
from reversi_agent.models.move import Move, PASS
from reversi_agent.agents.base import GameInterface

logger = logging.getLogger(__name__)


class RefereeConnection(GameInterface):
    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.last_color: Color | None = None  # colour of the last move received

    def _readline(self) -> str:
        line = self.stdin.readline()
        if not line:
            raise ProtocolError("Referee closed the connection")
        return line.strip()

    def _write(self, line: str) -> None:
        self.stdout.write(line + "\n")
        self.stdout.flush()

    def comment(self, message: str) -> None:
        for part in str(message).splitlines() or [""]:
            self._write(f"C {part}".rstrip())

    def init(self) -> Color:
        """Wait for the initialisation line and return our colour."""
        line = self._readline()
        tokens = line.upper().split()
        if len(tokens) != 2 or tokens[0] != "I" or tokens[1] not in ("B", "W"):
            raise ProtocolError(f"Expected 'I B' or 'I W', got {line!r}")
        return Color(tokens[1])

    def ready(self, color: Color) -> None:
        self._write(f"R {color.value}")

    def send_move(self, move: Move, color: Color) -> None:
        if move.is_pass:
            self._write(color.value)
        else:
            self._write(f"{color.value} {COLUMN_LETTERS[move.col]} {move.row + 1}")

    def receive_move(self) -> Move:
        """Block until the referee sends a move line; echo anything else."""
        while True:
            line = self._readline()
            if line[:1] in ("B", "W"):
                break
            if line:
                logger.debug("Referee: ignoring %r", line)
                self.comment(line)
        return self._parse_move(line)

    def _parse_move(self, line: str) -> Move:
        tokens = line.split()
        if tokens[0] not in ("B", "W"):
            raise ProtocolError(f"Malformed move line: {line!r}")
        self.last_color = Color(tokens[0])
        if len(tokens) == 1:
            return PASS
        if len(tokens) != 3:
            raise ProtocolError(f"Malformed move line: {line!r}")
        col, row = tokens[1].lower(), tokens[2]
        if col not in COLUMN_LETTERS or not row.isdigit():
            raise ProtocolError(f"Malformed move line: {line!r}")
        try:
            return Move.from_row_col(int(row) - 1, COLUMN_LETTERS.index(col))
        except InvalidMoveError as e:
            raise ProtocolError(f"Move off the board: {line!r}") from e
