"""Convert between domain models and API schemas."""

from reversi_agent.models.board import Board
from reversi_agent.models.enums import Color
from reversi_agent.engine.rules import candidate_moves, is_terminal, legal_moves
from reversi_agent.engine.scoring import score, winner
from reversi_agent.engine_search.types import EngineResult
from reversi_agent.api.schemas import (
    EngineMoveRec, GameStateSchema, LegalMoveSchema, LegalMovesResponse, SearchResponse,
)


def board_to_schema(game_id: str, board: Board) -> GameStateSchema:
    black, white = score(board)
    terminal = is_terminal(board)
    result = winner(board) if terminal else None
    return GameStateSchema(
        game_id=game_id,
        rows=board.to_rows(),
        to_move=board.to_move.value,
        turn=board.turn,
        passes=board.passes,
        black_count=black,
        white_count=white,
        is_terminal=terminal,
        winner=result.value if result else None,
        legal_moves=[m.to_notation() for m in candidate_moves(board)],
    )


def legal_moves_to_schema(board: Board) -> LegalMovesResponse:
    moves = [
        LegalMoveSchema(move=m.to_notation(), row=m.row, col=m.col, flips=m.flip_count)
        for m in legal_moves(board)
    ]
    return LegalMovesResponse(
        moves=moves,
        total=len(moves),
        must_pass=not moves and not is_terminal(board),
    )


def schema_to_color(value: str) -> Color:
    """'B'/'W' (any case) or 'black'/'white' to a Color; raises ValueError."""
    v = value.strip().lower()
    if v in ("b", "black"):
        return Color.BLACK
    if v in ("w", "white"):
        return Color.WHITE
    raise ValueError(f"Unknown colour: {value!r}")


def result_to_schema(result: EngineResult) -> SearchResponse:
    return SearchResponse(
        best_move=result.best_move.to_notation(),
        is_pass=result.is_pass,
        win_rate=result.win_rate,
        top_k_moves=[
            EngineMoveRec(
                rank=i,
                move=s.move.to_notation(),
                visit_count=s.visit_count,
                win_rate=s.win_rate,
                score=s.score,
            )
            for i, s in enumerate(result.top_k_moves, start=1)
        ],
        search_stats={
            "strategy": result.strategy.value,
            "iterations": result.iterations,
            "nodes": result.nodes,
            "elapsed_ms": result.elapsed_ms,
            "overshoot_ms": result.overshoot_ms,
            "thread_iterations": list(result.thread_iterations),
        },
    )
