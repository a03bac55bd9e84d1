"""Game state management routes."""

import uuid
from fastapi import APIRouter, HTTPException

from reversi_agent.errors import GameOverError, InvalidMoveError
from reversi_agent.models.board import Board
from reversi_agent.models.move import Move
from reversi_agent.engine_search.session import SearchSession
from reversi_agent.api.schemas import (
    CreateGameRequest, GameStateSchema, LegalMovesResponse, PlayMoveRequest,
)
from reversi_agent.api.serializers import (
    board_to_schema, legal_moves_to_schema, schema_to_color,
)

router = APIRouter()

# In-memory game store; each session owns the authoritative board and its search tree
_games: dict[str, SearchSession] = {}


def _get_game(game_id: str) -> SearchSession:
    if game_id not in _games:
        raise HTTPException(404, f"Game '{game_id}' not found")
    return _games[game_id]


@router.post("", status_code=201)
async def create_game(req: CreateGameRequest | None = None) -> GameStateSchema:
    if req is None or req.rows is None:
        board = Board.initial()
    else:
        try:
            board = Board.from_rows(req.rows, schema_to_color(req.to_move), req.turn)
        except ValueError as e:
            raise HTTPException(400, str(e))

    game_id = str(uuid.uuid4())[:8]
    _games[game_id] = SearchSession(board=board)
    return board_to_schema(game_id, board)


@router.get("/{game_id}")
async def get_game(game_id: str) -> GameStateSchema:
    return board_to_schema(game_id, _get_game(game_id).board)


@router.get("/{game_id}/legal-moves")
async def get_legal_moves(game_id: str) -> LegalMovesResponse:
    return legal_moves_to_schema(_get_game(game_id).board)


@router.post("/{game_id}/moves")
async def play_move(game_id: str, req: PlayMoveRequest) -> GameStateSchema:
    session = _get_game(game_id)
    try:
        move = Move.parse(req.move)
        board = session.apply_external_move(move)
    except GameOverError:
        raise HTTPException(400, "Game is already over")
    except InvalidMoveError as e:
        raise HTTPException(400, str(e))
    return board_to_schema(game_id, board)


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str) -> None:
    _get_game(game_id)
    del _games[game_id]
