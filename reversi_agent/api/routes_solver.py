"""Engine search routes."""

from fastapi import APIRouter, HTTPException

from reversi_agent.errors import ConfigurationError, InvalidMoveError
from reversi_agent.engine_search.types import EngineConfig
from reversi_agent.api.schemas import SearchRequest, SearchResponse
from reversi_agent.api.serializers import board_to_schema, result_to_schema

router = APIRouter()

# Import game store from routes_game
from reversi_agent.api.routes_game import _get_game


@router.post("/{game_id}/search", response_model=SearchResponse)
async def search_move(game_id: str, req: SearchRequest | None = None) -> SearchResponse:
    """Ask the engine for a move on the stored position.

    A position where the side to move has no legal move answers "pass"
    without searching.
    """
    session = _get_game(game_id)
    if req is None:
        req = SearchRequest()

    try:
        cfg = EngineConfig.from_dict(req.model_dump(exclude={"apply"}))
    except ConfigurationError as e:
        raise HTTPException(400, str(e))

    result = session.search(cfg)
    response = result_to_schema(result)
    if req.apply:
        try:
            board = session.apply_external_move(result.best_move)
        except InvalidMoveError as e:
            raise HTTPException(400, str(e))
        response.state = board_to_schema(game_id, board)
    return response
