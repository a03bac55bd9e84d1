"""Pydantic schemas for API request/response models."""

from pydantic import BaseModel, Field


# --- Game state ---

class GameStateSchema(BaseModel):
    game_id: str
    rows: list[str]  # 8 strings of 'B', 'W', '.', row 1 first
    to_move: str  # "B" or "W"
    turn: int = 0
    passes: int = 0
    black_count: int = 0
    white_count: int = 0
    is_terminal: bool = False
    winner: str | None = None  # "B", "W", or None for a draw / game in progress
    legal_moves: list[str] = Field(default_factory=list)  # e.g. ["c4", "d3"], or ["pass"]


class CreateGameRequest(BaseModel):
    rows: list[str] | None = None  # custom position; standard start when omitted
    to_move: str = "B"
    turn: int = 0


class PlayMoveRequest(BaseModel):
    move: str  # "d3" or "pass"


# --- Legal moves ---

class LegalMoveSchema(BaseModel):
    move: str
    row: int | None = None
    col: int | None = None
    flips: int = 0


class LegalMovesResponse(BaseModel):
    moves: list[LegalMoveSchema]
    total: int
    must_pass: bool = False


# --- Search ---

class SearchRequest(BaseModel):
    time_budget_ms: float | None = 1000  # None = no deadline (max_iterations required)
    max_iterations: int | None = None
    thread_count: int = 1
    exploration_constant: float = 1.4142135623730951
    rollout_policy: str = "random"  # random, heuristic
    strategy: str = "mcts"  # mcts, minimax, alpha_beta
    selection_policy: str = "robust_child"  # robust_child, max_win_rate, blended
    minimax_depth: int | None = None
    seed: int | None = None
    top_k: int = 5
    apply: bool = False  # play the best move on the stored game


class EngineMoveRec(BaseModel):
    rank: int
    move: str
    visit_count: int
    win_rate: float | None = None
    score: float


class SearchResponse(BaseModel):
    best_move: str
    is_pass: bool = False
    win_rate: float | None = None
    top_k_moves: list[EngineMoveRec] = Field(default_factory=list)
    search_stats: dict = Field(default_factory=dict)
    state: GameStateSchema | None = None  # set when the move was applied
