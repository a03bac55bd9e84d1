from enum import Enum


class Color(Enum):
    BLACK = "B"
    WHITE = "W"

    @property
    def opponent(self) -> "Color":
        return Color.WHITE if self is Color.BLACK else Color.BLACK

    def __str__(self) -> str:
        return self.value


class RolloutPolicy(Enum):
    RANDOM = "random"
    HEURISTIC = "heuristic"


class StrategyKind(Enum):
    MCTS = "mcts"
    MINIMAX = "minimax"
    ALPHA_BETA = "alpha_beta"


class SelectionPolicy(Enum):
    """How the final move is picked from the root's children."""
    ROBUST_CHILD = "robust_child"  # most visits
    MAX_WIN_RATE = "max_win_rate"
    BLENDED = "blended"  # visits + win ratio + positional features
