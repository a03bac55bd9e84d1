"""Immutable Reversi position backed by two 64-bit masks."""

from dataclasses import dataclass

from reversi_agent.config import (
    BLACK_START, BOARD_SIZE, COLUMN_LETTERS, FULL_MASK, WHITE_START,
)
from reversi_agent.models.enums import Color


@dataclass(frozen=True)
class Board:
    """A Reversi position.

    black/white: occupancy masks, bit index row * 8 + col (a1 = bit 0).
    to_move: the side whose turn it is.
    turn: plies played so far, passes included.
    passes: consecutive passes leading up to this position.
    """
    black: int = BLACK_START
    white: int = WHITE_START
    to_move: Color = Color.BLACK
    turn: int = 0
    passes: int = 0

    def __post_init__(self):
        if self.black & self.white:
            raise ValueError("A square cannot hold both a black and a white disc")
        if (self.black | self.white) & ~FULL_MASK:
            raise ValueError("Disc mask has bits outside the 8x8 board")

    @classmethod
    def initial(cls) -> "Board":
        return cls()

    @classmethod
    def from_rows(cls, rows: list[str], to_move: Color = Color.BLACK,
                  turn: int = 0) -> "Board":
        """Build a board from 8 strings of 'B', 'W' and '.', row 1 first."""
        if len(rows) != BOARD_SIZE:
            raise ValueError(f"Expected {BOARD_SIZE} rows, got {len(rows)}")
        black = white = 0
        for r, line in enumerate(rows):
            cells = line.replace(" ", "")
            if len(cells) != BOARD_SIZE:
                raise ValueError(f"Row {r + 1} must have {BOARD_SIZE} cells: {line!r}")
            for c, ch in enumerate(cells.upper()):
                bit = 1 << (r * BOARD_SIZE + c)
                if ch == "B":
                    black |= bit
                elif ch == "W":
                    white |= bit
                elif ch not in ".-":
                    raise ValueError(f"Unknown cell {ch!r} in row {r + 1}")
        return cls(black=black, white=white, to_move=to_move, turn=turn)

    def discs(self, color: Color) -> int:
        return self.black if color is Color.BLACK else self.white

    @property
    def own(self) -> int:
        return self.discs(self.to_move)

    @property
    def opponent(self) -> int:
        return self.discs(self.to_move.opponent)

    @property
    def occupied(self) -> int:
        return self.black | self.white

    @property
    def empty(self) -> int:
        return ~self.occupied & FULL_MASK

    @property
    def disc_count(self) -> int:
        return bin(self.occupied).count("1")

    @property
    def empty_count(self) -> int:
        return BOARD_SIZE * BOARD_SIZE - self.disc_count

    @property
    def is_full(self) -> bool:
        return self.occupied == FULL_MASK

    @property
    def position_key(self) -> tuple[int, int, Color]:
        """Identity of the position, ignoring move counters."""
        return (self.black, self.white, self.to_move)

    def cell(self, row: int, col: int) -> Color | None:
        bit = 1 << (row * BOARD_SIZE + col)
        if self.black & bit:
            return Color.BLACK
        if self.white & bit:
            return Color.WHITE
        return None

    def to_rows(self) -> list[str]:
        rows = []
        for r in range(BOARD_SIZE):
            line = ""
            for c in range(BOARD_SIZE):
                color = self.cell(r, c)
                line += color.value if color else "."
            rows.append(line)
        return rows

    def render(self) -> str:
        """Human-readable board with column letters and 1-based rows."""
        lines = ["  " + " ".join(COLUMN_LETTERS)]
        for r, row in enumerate(self.to_rows()):
            lines.append(f"{r + 1} " + " ".join(row))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
