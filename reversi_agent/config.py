import math

# Board geometry. Square index = row * 8 + col, a1 is bit 0, h8 is bit 63.
BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE
FULL_MASK = (1 << NUM_SQUARES) - 1
COLUMN_LETTERS = "abcdefgh"

# Starting position: white on d4/e5, black on e4/d5, black moves first.
BLACK_START = (1 << 28) | (1 << 35)
WHITE_START = (1 << 27) | (1 << 36)

# Square classes used by heuristics
CORNERS = (0, 7, 56, 63)

# Squares adjacent to a corner (diagonally or along an edge)
X_SQUARES = (1, 6, 8, 9, 14, 15, 48, 49, 54, 55, 57, 62)

EDGES = (
    0, 1, 2, 3, 4, 5, 6, 7,
    8, 16, 24, 32, 40, 48, 56,
    15, 23, 31, 39, 47, 55,
    57, 58, 59, 60, 61, 62, 63,
)

# Both corner-to-corner diagonals
DIAGONALS = (0, 9, 18, 27, 36, 45, 54, 63, 7, 14, 21, 28, 35, 42, 49, 56)

CENTER_4 = (27, 28, 35, 36)

INNER_BOARD = (
    18, 19, 20, 21,
    26, 27, 28, 29,
    34, 35, 36, 37,
    42, 43, 44, 45,
)


def squares_to_mask(squares) -> int:
    mask = 0
    for sq in squares:
        mask |= 1 << sq
    return mask


CORNER_MASK = squares_to_mask(CORNERS)
X_SQUARE_MASK = squares_to_mask(X_SQUARES)
EDGE_MASK = squares_to_mask(EDGES)
DIAGONAL_MASK = squares_to_mask(DIAGONALS)
CENTER_4_MASK = squares_to_mask(CENTER_4)
INNER_BOARD_MASK = squares_to_mask(INNER_BOARD)

# Per-turn time allocation as a fraction of the time left on the game clock.
# Index is the turn number; turns past the end reuse the last entry.
TIME_ALLOCATIONS = (
    0.015, 0.015, 0.015, 0.015, 0.025, 0.025, 0.025, 0.025, 0.025, 0.025, 0.048, 0.048, 0.048,
    0.048, 0.048, 0.048, 0.050, 0.051, 0.052, 0.053, 0.044, 0.045, 0.049, 0.049, 0.049, 0.051,
    0.053, 0.055, 0.057, 0.059, 0.060, 0.060, 0.061, 0.062, 0.063, 0.064, 0.065, 0.065, 0.065,
    0.065, 0.167, 0.168, 0.169, 0.169, 0.171, 0.172, 0.173, 0.175, 0.180, 0.180, 0.181, 0.187,
    0.196, 0.199, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060, 0.060,
    0.060, 0.060, 0.060, 0.060, 0.060,
)

# Game clock and search defaults
DEFAULT_MAX_TIME_S = 120.0
DEFAULT_TIME_BUDGET_MS = 1000
DEFAULT_EXPLORATION = math.sqrt(2)
DEFAULT_TOP_K = 5

# 60 placements plus passes; anything longer is a rules bug
MAX_ROLLOUT_PLIES = 128

# Static evaluation (minimax strategies)
MID_GAME_TURN = 35
CORNER_MULTIPLIER = 5
EDGE_MULTIPLIER = 2
MINIMAX_DEPTH = 2
ALPHA_BETA_DEPTH = 4
WIN_SCORE = 10_000

# Rollout move weights for the heuristic policy, by square class
ROLLOUT_WEIGHT_EDGE = 4.0
ROLLOUT_WEIGHT_INNER = 2.0
ROLLOUT_WEIGHT_OTHER = 1.0
ROLLOUT_WEIGHT_X_SQUARE = 0.25
