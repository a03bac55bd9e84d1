"""A single Reversi move: a square to place a disc on, or a pass."""

from dataclasses import dataclass, field

from reversi_agent.config import BOARD_SIZE, COLUMN_LETTERS, NUM_SQUARES
from reversi_agent.errors import InvalidMoveError


@dataclass(frozen=True)
class Move:
    """A move on the 8x8 board.

    square: 0-63 (row * 8 + col), or None for a pass.
    flips: mask of opponent discs this move captures. Filled in by move
        generation; ignored by equality so a parsed move matches the
        generated one.
    """
    square: int | None
    flips: int = field(default=0, compare=False)

    @classmethod
    def from_row_col(cls, row: int, col: int) -> "Move":
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise InvalidMoveError(f"Square off the board: row={row} col={col}")
        return cls(row * BOARD_SIZE + col)

    @classmethod
    def parse(cls, text: str) -> "Move":
        """Parse algebraic notation: 'd3', 'D 3' or 'pass'."""
        token = "".join(text.split()).lower()
        if token in ("pass", "-", ""):
            return PASS
        if len(token) != 2 or token[0] not in COLUMN_LETTERS or not token[1].isdigit():
            raise InvalidMoveError(f"Cannot parse move: {text!r}")
        return cls.from_row_col(int(token[1]) - 1, COLUMN_LETTERS.index(token[0]))

    @property
    def is_pass(self) -> bool:
        return self.square is None

    @property
    def row(self) -> int | None:
        return None if self.square is None else self.square // BOARD_SIZE

    @property
    def col(self) -> int | None:
        return None if self.square is None else self.square % BOARD_SIZE

    @property
    def mask(self) -> int:
        return 0 if self.square is None else 1 << self.square

    @property
    def flip_count(self) -> int:
        return bin(self.flips).count("1")

    @property
    def sort_key(self) -> int:
        return NUM_SQUARES if self.square is None else self.square

    def to_notation(self) -> str:
        if self.square is None:
            return "pass"
        return f"{COLUMN_LETTERS[self.col]}{self.row + 1}"

    def __str__(self) -> str:
        return self.to_notation()


PASS = Move(None)
